"""Output helpers shared by commands."""
from __future__ import annotations

import json
import sys
from typing import Any, Optional, Sequence, Type

import typer
from pydantic import BaseModel

SCHEMA_VERSION = "1.0"


def resolve_format(
    format: Optional[str],
    *,
    default_tty: str = "text",
    allowed: Sequence[str] = ("text", "json"),
) -> str:
    """Pick the output format: explicit value, else text on a TTY and json when piped."""
    if format is None:
        return default_tty if sys.stdout.isatty() else "json"
    value = format.strip().lower()
    if value not in allowed:
        raise typer.BadParameter(
            f"unsupported format {format!r}; choose from {', '.join(allowed)}",
            param_hint="--format",
        )
    return value


def emit_json(
    data: Any,
    *,
    schema: Optional[Type[BaseModel]] = None,
    status: str = "success",
    error_code: Optional[str] = None,
    message: Optional[str] = None,
) -> None:
    """Print a JSON envelope, validating ``data`` against ``schema`` first."""
    if schema is not None:
        data = schema.model_validate(data).model_dump(mode="json")
    envelope: dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "status": status,
        "data": data,
    }
    if error_code:
        envelope["error_code"] = error_code
    if message:
        envelope["message"] = message
    typer.echo(json.dumps(envelope, indent=2, default=str))
