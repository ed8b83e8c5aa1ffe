"""
api/main.py - punkt wejścia FastAPI.

Lifespan:
  - Tworzy FunctionRegistry z wbudowanymi funkcjami
  - Inicjalizuje adaptery (ExpressionParser, Validator, MemoizingEvaluator)

Adaptery są bezstanowe między żądaniami: cache wywołań żyje tylko
w obrębie jednego evaluate(), więc nic nie jest współdzielone.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adapters.evaluator.memo_evaluator import MemoizingEvaluator
from adapters.expression_parser.regex_parser import RegexExpressionParser
from adapters.function_registry.dict_function_registry import DictFunctionRegistry
from adapters.validator.expression_validator import ExpressionValidator
from api.routers import evaluate, functions
from api.schemas import HealthResponse
from config import Settings

logger = logging.getLogger("memocalc")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # Adaptery bezstanowe - tworzone raz
    registry = DictFunctionRegistry()
    app.state.function_registry = registry
    app.state.expression_parser = RegexExpressionParser(registry)
    app.state.validator = ExpressionValidator()
    app.state.evaluator = MemoizingEvaluator(max_depth=settings.max_depth)

    logger.info("MemoCalc API ready (%d functions).", len(registry.names()))
    yield

    logger.info("Shutting down.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(evaluate.router)
    app.include_router(functions.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(
            status="ok",
            max_depth=settings.max_depth,
            version=settings.app_version,
        )

    return app


app = create_app()
