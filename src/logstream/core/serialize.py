"""Serialization of logged data into record payloads.

Data is first converted into a JSON-compatible tree. When that trial pass
meets a circular reference or a value it cannot represent, the data is
rendered instead as a single-line structural dump bounded by a depth limit,
with cycles marked explicitly::

    { a: <ref *1> [ A { a: [Circular *1] } ] }
"""

import dataclasses
import json
import logging
import math
import traceback
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from types import BuiltinFunctionType, FunctionType, MethodType, ModuleType
from typing import Any
from uuid import UUID

from logstream.core.models import ErrorDescriptor

logger = logging.getLogger("logstream")

DEFAULT_DEPTH = 2

_SEQUENCE_TYPES = (list, tuple, set, frozenset)
_OPAQUE_TYPES = (type, FunctionType, BuiltinFunctionType, MethodType, ModuleType)


class _Unencodable(Exception):
    """Trial pass hit a cycle or a value with no JSON form."""


def to_error_descriptor(exc: BaseException) -> ErrorDescriptor:
    """Extract name, message and formatted traceback from an exception.

    The stack always holds at least the ``Name: message`` line, plus the
    frames when the exception has been raised.
    """
    return ErrorDescriptor(
        name=type(exc).__name__,
        message=str(exc),
        stack="".join(traceback.format_exception(exc)),
    )


def describe(
    value: Any,
    depth: int = DEFAULT_DEPTH,
    *,
    as_error: bool = False,
) -> tuple[Any, ErrorDescriptor | None]:
    """Split logged data into a payload or an error descriptor.

    Args:
        value: Data passed to the logging call.
        depth: Depth limit for the fallback dump.
        as_error: Wrap any non-None value as an error descriptor.

    Returns:
        ``(payload, error)`` where at most one side is populated.
    """
    if isinstance(value, BaseException):
        return None, to_error_descriptor(value)
    if as_error and value is not None:
        if isinstance(value, str):
            message = value
        else:
            payload = to_payload(value, depth)
            message = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        return None, ErrorDescriptor(name="Error", message=message)
    return to_payload(value, depth), None


def to_payload(value: Any, depth: int = DEFAULT_DEPTH) -> Any:
    """Convert data into a JSON-compatible tree, or a dump string on failure.

    Args:
        value: Arbitrary data.
        depth: Depth limit, applied only to the fallback dump.

    Returns:
        A tree of dicts, lists and scalars, or a structural dump string.
    """
    try:
        return to_plain(value)
    except (_Unencodable, RecursionError) as exc:
        logger.debug("Falling back to structural dump: %s", exc)
        return inspect_value(value, depth)


def to_plain(value: Any) -> Any:
    """Convert data into a JSON-compatible tree.

    Raises:
        _Unencodable: On a circular reference or an unsupported value.
    """
    return _plain(value, set())


def _plain(value: Any, ancestors: set[int]) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, Enum):
        return _plain(value.value, ancestors)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID, PurePath)):
        return str(value)
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    if not _is_container(value):
        raise _Unencodable(f"unsupported type {type(value).__name__}")

    key = id(value)
    if key in ancestors:
        raise _Unencodable("circular reference")
    ancestors.add(key)
    try:
        if isinstance(value, Mapping):
            return {_plain_key(k): _plain(v, ancestors) for k, v in value.items()}
        if isinstance(value, _SEQUENCE_TYPES):
            return [_plain(item, ancestors) for item in value]
        return {k: _plain(v, ancestors) for k, v in _attributes(value)}
    finally:
        ancestors.discard(key)


def _plain_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return json.dumps(key)
    raise _Unencodable(f"unsupported key type {type(key).__name__}")


def _is_container(value: Any) -> bool:
    if isinstance(value, (Mapping, *_SEQUENCE_TYPES)):
        return True
    if isinstance(value, _OPAQUE_TYPES) or isinstance(value, BaseException):
        return False
    if dataclasses.is_dataclass(value):
        return True
    return hasattr(value, "__dict__")


def _attributes(obj: Any) -> list[tuple[str, Any]]:
    """Public attributes of an object, in definition order."""
    if dataclasses.is_dataclass(obj):
        return [(f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj)]
    return [(k, v) for k, v in vars(obj).items() if not k.startswith("_")]


def _children(value: Any) -> list[Any]:
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, _SEQUENCE_TYPES):
        return list(value)
    return [v for _, v in _attributes(value)]


def inspect_value(value: Any, depth: int = DEFAULT_DEPTH) -> str:
    """Render data as a single-line structural dump.

    Containers nested deeper than ``depth`` are elided as ``[Object]``,
    ``[Array]`` or ``[ClassName]``. Depth 0 still shows the top-level keys.
    An object reached again through one of its own descendants is marked
    ``<ref *N>`` where it first appears and ``[Circular *N]`` on revisit.

    Args:
        value: Arbitrary data, possibly self-referential.
        depth: Maximum nesting level rendered in full.

    Returns:
        The dump text.
    """
    refs: dict[int, int] = {}
    _find_cycles(value, 0, depth, set(), refs)
    return _Inspector(depth, refs).render(value, 0, set())


def _find_cycles(
    value: Any, level: int, depth: int, ancestors: set[int], refs: dict[int, int]
) -> None:
    if not _is_container(value):
        return
    key = id(value)
    if key in ancestors:
        refs.setdefault(key, len(refs) + 1)
        return
    if level > depth:
        return
    ancestors.add(key)
    for child in _children(value):
        _find_cycles(child, level + 1, depth, ancestors, refs)
    ancestors.discard(key)


class _Inspector:
    """Renders containers once the cycle targets are known."""

    def __init__(self, depth: int, refs: dict[int, int]) -> None:
        self._depth = depth
        self._refs = refs

    def render(self, value: Any, level: int, ancestors: set[int]) -> str:
        if not _is_container(value):
            return repr(value)
        key = id(value)
        if key in ancestors:
            return f"[Circular *{self._refs[key]}]"
        if level > self._depth:
            return self._elided(value)

        ancestors.add(key)
        try:
            body = self._body(value, level + 1, ancestors)
        finally:
            ancestors.discard(key)

        if key in self._refs:
            return f"<ref *{self._refs[key]}> {body}"
        return body

    def _body(self, value: Any, level: int, ancestors: set[int]) -> str:
        if isinstance(value, Mapping):
            items = [
                f"{_dump_key(k)}: {self.render(v, level, ancestors)}" for k, v in value.items()
            ]
            return _wrap("{", items, "}")
        if isinstance(value, list):
            return _wrap("[", [self.render(v, level, ancestors) for v in value], "]")
        if isinstance(value, tuple):
            return _wrap("(", [self.render(v, level, ancestors) for v in value], ")")
        if isinstance(value, (set, frozenset)):
            items = [self.render(v, level, ancestors) for v in value]
            return f"{type(value).__name__} {_wrap('{', items, '}')}"
        items = [f"{k}: {self.render(v, level, ancestors)}" for k, v in _attributes(value)]
        return f"{type(value).__name__} {_wrap('{', items, '}')}"

    @staticmethod
    def _elided(value: Any) -> str:
        if isinstance(value, Mapping):
            return "[Object]"
        if isinstance(value, _SEQUENCE_TYPES):
            return "[Array]"
        return f"[{type(value).__name__}]"


def _wrap(opening: str, items: list[str], closing: str) -> str:
    if not items:
        return f"{opening}{closing}"
    return f"{opening} {', '.join(items)} {closing}"


def _dump_key(key: Any) -> str:
    if isinstance(key, str) and key.isidentifier():
        return key
    return repr(key)
