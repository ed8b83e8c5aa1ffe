"""
dependencies.py - FastAPI Dependency Injection.
Każda zależność zwraca odpowiedni adapter przez Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from adapters.evaluator.memo_evaluator import MemoizingEvaluator
from adapters.expression_parser.regex_parser import RegexExpressionParser
from adapters.function_registry.dict_function_registry import DictFunctionRegistry
from adapters.validator.expression_validator import ExpressionValidator
from config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_function_registry(request: Request) -> DictFunctionRegistry:
    return request.app.state.function_registry


def get_expression_parser(request: Request) -> RegexExpressionParser:
    return request.app.state.expression_parser


def get_validator(request: Request) -> ExpressionValidator:
    return request.app.state.validator


def get_evaluator(request: Request) -> MemoizingEvaluator:
    return request.app.state.evaluator
