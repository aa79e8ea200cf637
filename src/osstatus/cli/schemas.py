"""
Response schemas for CLI commands.

These Pydantic models keep the JSON output of ``collect`` and
``validate-auth`` stable for scripts that consume it.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base config shared by response schemas."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class KindOut(BaseSchema):
    kind: str
    ok: bool
    counts: Dict[str, int]
    record_count: int
    duration_seconds: float
    error: Optional[str] = None


class CollectResponse(BaseSchema):
    operational: bool
    auth_error: Optional[str] = None
    started_at: str
    duration_seconds: float
    kinds: List[KindOut]


class ValidateAuthResponse(BaseSchema):
    success: bool
    region: Optional[str] = None
    endpoints: Dict[str, Optional[str]] = {}
