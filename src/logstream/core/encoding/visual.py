"""Human-readable log line rendering with optional ANSI colors."""

import json

from logstream.core.models import LogLevel, LogRecord

RESET = "\x1b[0m"
NAME_COLOR = "\x1b[36m"
LEVEL_COLORS = {
    LogLevel.DEBUG: "\x1b[34m",
    LogLevel.INFO: "\x1b[32m",
    LogLevel.WARN: "\x1b[33m",
    LogLevel.ERROR: "\x1b[31m",
}


def colorize(text: str, color: str, use_color: bool = True) -> str:
    """Wrap text in an ANSI color sequence when colors are enabled."""
    if not use_color or not color:
        return text
    return f"{color}{text}{RESET}"


def render_body(record: LogRecord) -> str:
    """Render the payload or error of a record on a single line.

    Strings (including fallback dumps) are shown verbatim, structured
    payloads as JSON, errors as ``Name: message``. Newlines inside the body
    are written as ``\\n`` so every record stays one line.
    """
    if record.error is not None:
        body = f"{record.error.name}: {record.error.message}"
    elif record.payload is None:
        return ""
    elif isinstance(record.payload, str):
        body = record.payload
    else:
        body = json.dumps(record.payload, ensure_ascii=False)
    return body.replace("\n", "\\n")


def render_record(record: LogRecord, *, use_color: bool = True) -> str:
    """Render ``<LEVEL> (<scope>): <name> <body>``.

    Args:
        record: The record to render.
        use_color: Wrap the level and name in ANSI colors. When False the
            output contains no escape sequences at all.

    Returns:
        The rendered text, without terminator.
    """
    level = colorize(record.level.name, LEVEL_COLORS.get(record.level, ""), use_color)
    name = colorize(record.name, NAME_COLOR, use_color)
    line = f"{level} ({record.scope}): {name}"
    body = render_body(record)
    if body:
        line = f"{line} {body}"
    return line
