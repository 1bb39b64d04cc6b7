"""Adapters connecting logstream to outside I/O and libraries."""
