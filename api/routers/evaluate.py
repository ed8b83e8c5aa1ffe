"""
Router: POST /evaluate
  1. Parsuje tekst (ExpressionParser, funkcje z rejestru)
  2. Waliduje drzewo (Validator) - wolne zmienne, arność, głębokość
  3. Liczy wartość (MemoizingEvaluator) - nowa sesja cache na każde żądanie

Błędy:
  422 - błąd parsowania / walidacji / nieobsługiwany węzeł
  400 - dzielenie przez zero lub błąd wywołanej funkcji
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import (
    get_evaluator,
    get_expression_parser,
    get_settings,
    get_validator,
)
from api.schemas import EvaluateErrorResponse, EvaluateRequest, EvaluateResponse
from errors import EvaluationError, InvalidResultError
from expr_tree import render

logger = logging.getLogger("memocalc.api")

router = APIRouter(prefix="/evaluate", tags=["evaluate"])


def _error(status_code: int, detail: str, issues=None) -> JSONResponse:
    body = EvaluateErrorResponse(detail=detail, issues=issues or [])
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "",
    response_model=EvaluateResponse,
    responses={400: {"model": EvaluateErrorResponse}, 422: {"model": EvaluateErrorResponse}},
)
def evaluate_expression(
    body: EvaluateRequest,
    settings=Depends(get_settings),
    parser=Depends(get_expression_parser),
    validator=Depends(get_validator),
    evaluator=Depends(get_evaluator),
):
    parsed = parser.parse(body.text)
    if not parsed.ok:
        return _error(422, f"Parse error: {parsed.error}")

    issues = validator.validate_expr(parsed.expr_ast, max_depth=settings.max_depth)
    errors = [i for i in issues if i.severity == "error"]
    if errors:
        return _error(422, "Expression is not evaluable", errors)

    try:
        result = evaluator.eval_expr(parsed.expr_ast)
    except ZeroDivisionError as exc:
        return _error(400, f"Division by zero: {exc}")
    except InvalidResultError as exc:
        return _error(400, str(exc))
    except EvaluationError as exc:
        return _error(422, str(exc))
    except (ArithmeticError, ValueError, TypeError) as exc:
        # błąd zgłoszony przez samą funkcję (np. fact(-1))
        logger.info("Function call failed for %r: %s", body.text, exc)
        return _error(400, f"Function call failed: {exc}")
    except Exception as exc:
        logger.exception("Unexpected error from function call in %r", body.text)
        return _error(400, f"Function call failed: {type(exc).__name__}: {exc}")

    return EvaluateResponse(
        expression=render(parsed.expr_ast),
        value=result.value,
        steps=result.steps if body.trace else [],
        invocations=result.invocations,
        cache_hits=result.cache_hits,
    )
