"""
schemas.py - Request/Response modele FastAPI.
Oddzielone od contracts.py żeby API mogło ewoluować niezależnie.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from contracts import ValidationIssue


# ─────────────────────────── /evaluate ───────────────────────────

class EvaluateRequest(BaseModel):
    text: str = Field(min_length=1)
    trace: bool = False  # zwraca kroki obliczeń


class EvaluateResponse(BaseModel):
    expression: str      # wyrażenie po sparsowaniu (pełne nawiasy)
    value: int
    steps: list[str] = []
    invocations: dict[str, int] = {}
    cache_hits: int = 0


class EvaluateErrorResponse(BaseModel):
    detail: str
    issues: list[ValidationIssue] = []


# ─────────────────────────── /functions ──────────────────────────

class FunctionsResponse(BaseModel):
    names: list[str]


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    max_depth: int
    version: str
