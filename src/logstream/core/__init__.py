"""Core domain: models, ports, serialization, formatting and delivery."""
