"""
CLI error taxonomy and the handle_errors decorator.

Commands raise ExporterError with a stable error code; handle_errors turns
it into a clean message (or JSON envelope) and a mapped exit code, never a
traceback.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional

import typer
from pydantic import ValidationError

log = logging.getLogger(__name__)


class ErrorCode:
    AUTH_ERROR = "AUTH_ERROR"
    INVALID_CONFIG = "INVALID_CONFIG"
    INTERNAL_ERROR = "INTERNAL_ERROR"


EXIT_CODE_MAP = {
    "ok": 0,
    "degraded": 1,
    "usage": 2,
    "internal": 3,
}


class ExporterError(Exception):
    """Error carrying a stable code, a user-facing hint and an exit code."""

    def __init__(
        self,
        *,
        error_code: str,
        message: str,
        hint: Optional[str] = None,
        exit_code: int = EXIT_CODE_MAP["internal"],
    ):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.hint = hint
        self.exit_code = exit_code

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.hint:
            payload["hint"] = self.hint
        return payload


def handle_errors(func: Callable) -> Callable:
    """Convert exceptions raised by a command into exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from osstatus.cli.output import emit_json

        output_format = "json" if kwargs.get("json_output") else kwargs.get("format")
        try:
            return func(*args, **kwargs)
        except (typer.Exit, typer.Abort, typer.BadParameter):
            raise
        except ExporterError as e:
            error = e
        except ValidationError as e:
            error = ExporterError(
                error_code=ErrorCode.INVALID_CONFIG,
                message=_summarize_validation(e),
                exit_code=EXIT_CODE_MAP["usage"],
            )
        except Exception as e:
            log.debug("Unhandled error", exc_info=True)
            error = ExporterError(
                error_code=ErrorCode.INTERNAL_ERROR,
                message=str(e) or type(e).__name__,
                exit_code=EXIT_CODE_MAP["internal"],
            )

        if output_format == "json":
            emit_json(
                error.to_payload(),
                status="error",
                error_code=error.error_code,
                message=error.message,
            )
        else:
            typer.echo(f"Error [{error.error_code}]: {error.message}", err=True)
            if error.hint:
                typer.echo(f"  Hint: {error.hint}", err=True)
        raise typer.Exit(error.exit_code)

    return wrapper


def _summarize_validation(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "config"
        parts.append(f"{location}: {item.get('msg')}")
    return "invalid configuration: " + "; ".join(parts)
