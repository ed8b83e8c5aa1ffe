#!/usr/bin/env python3
"""
memocalc.py - CLI narzędzie MemoCalc.

Działa całkowicie lokalnie - nie wymaga uruchomionego serwera API.

Konfiguracja: zmienne środowiskowe z prefiksem MEMOCALC_
lub plik .env (np. MEMOCALC_MAX_DEPTH=500).

Podkomendy:
    eval       - policz wartość wyrażenia (z memoizacją wywołań)
    check      - tylko parsowanie + walidacja, bez wywoływania funkcji
    functions  - listuj dostępne funkcje

Użycie:
    python memocalc.py eval --text "max(2, 3) * max(2, 3) + 1"
    python memocalc.py eval --text "fact(5) / fact(3)" --steps
    echo "gcd(12, 18) + x" | python memocalc.py check
    python memocalc.py functions
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from contracts import ValidationIssue


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _safe_terminal_text(value: Any) -> str:
    s = str(value).replace("×", "x").replace("÷", "/").replace("…", "...")
    encoding = sys.stdout.encoding or "utf-8"
    try:
        s.encode(encoding)
        return s
    except UnicodeEncodeError:
        return s.encode(encoding, errors="replace").decode(encoding, errors="replace")


def _print_kv_table(title: str, rows: list[tuple[str, Any]]) -> None:
    table = Table(title=title, box=box.ASCII, show_header=False, pad_edge=False)
    table.add_column("Key", no_wrap=True, style="bold cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(_safe_terminal_text(key), _safe_terminal_text(value))
    _console().print(table)


def _print_invocations_table(invocations: dict[str, int], cache_hits: int) -> None:
    table = Table(title=f"Calls [{sum(invocations.values())}]", box=box.ASCII)
    table.add_column("Function", no_wrap=True, style="cyan")
    table.add_column("Invoked", justify="right", no_wrap=True)
    for name in sorted(invocations):
        table.add_row(_safe_terminal_text(name), str(invocations[name]))
    table.add_row("(cache hits)", str(cache_hits), style="dim")
    _console().print(table)


def _print_issues(issues: list[ValidationIssue]) -> None:
    for issue in issues:
        print(
            f"  [{issue.severity}] {issue.code} @ {issue.field_path}: {issue.message}",
            file=sys.stderr,
        )


def _read_text(args: argparse.Namespace) -> str:
    text = args.text or sys.stdin.read().strip()
    if not text:
        print("Błąd: podaj wyrażenie przez --text lub stdin", file=sys.stderr)
        sys.exit(1)
    return text


def _build(settings):
    from adapters.evaluator.memo_evaluator import MemoizingEvaluator
    from adapters.expression_parser.regex_parser import RegexExpressionParser
    from adapters.function_registry.dict_function_registry import DictFunctionRegistry
    from adapters.validator.expression_validator import ExpressionValidator

    registry = DictFunctionRegistry()
    return (
        registry,
        RegexExpressionParser(registry),
        ExpressionValidator(),
        MemoizingEvaluator(max_depth=settings.max_depth),
    )


def _parse_and_validate(text: str, settings, parser, validator):
    parsed = parser.parse(text)
    if not parsed.ok:
        print(f"Błąd parsowania: {parsed.error}", file=sys.stderr)
        sys.exit(1)

    issues = validator.validate_expr(parsed.expr_ast, max_depth=settings.max_depth)
    if any(i.severity == "error" for i in issues):
        print("Wyrażenie nie nadaje się do obliczenia:", file=sys.stderr)
        _print_issues(issues)
        sys.exit(1)
    return parsed


# -- podkomendy ------------------------------------------------------------

def _eval(args: argparse.Namespace, settings) -> None:
    from errors import EvaluationError
    from expr_tree import render

    text = _read_text(args)
    _, parser, validator, evaluator = _build(settings)
    parsed = _parse_and_validate(text, settings, parser, validator)

    try:
        result = evaluator.eval_expr(parsed.expr_ast)
    except ZeroDivisionError:
        print("Błąd: dzielenie przez zero", file=sys.stderr)
        sys.exit(1)
    except EvaluationError as exc:
        print(f"Błąd ewaluacji: {exc}", file=sys.stderr)
        sys.exit(1)
    except (ArithmeticError, ValueError, TypeError) as exc:
        print(f"Błąd wywołania funkcji: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        logging.getLogger("memocalc").exception("Unexpected error in %r", text)
        print(f"Błąd wywołania funkcji: {type(exc).__name__}: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.quiet:
        print(result.value)
        return

    _print_kv_table("Result", [
        ("expression", render(parsed.expr_ast)),
        ("value", result.value),
    ])
    if result.invocations or result.cache_hits:
        _print_invocations_table(result.invocations, result.cache_hits)
    if args.steps:
        for i, step in enumerate(result.steps, 1):
            print(f"  {i:>3}. {_safe_terminal_text(step)}")


def _check(args: argparse.Namespace, settings) -> None:
    from expr_tree import depth, render

    text = _read_text(args)
    _, parser, validator, _ = _build(settings)
    parsed = _parse_and_validate(text, settings, parser, validator)

    _print_kv_table("Check", [
        ("expression", render(parsed.expr_ast)),
        ("depth", depth(parsed.expr_ast)),
        ("functions", ", ".join(parsed.functions_referenced) or "-"),
        ("status", "ok"),
    ])


def _functions(args: argparse.Namespace, settings) -> None:
    registry, _, _, _ = _build(settings)
    for name in registry.names():
        print(name)


# -- main ------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    from config import Settings

    parser = argparse.ArgumentParser(
        prog="memocalc",
        description="MemoCalc - ewaluator wyrażeń z memoizacją wywołań funkcji",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # eval
    p = sub.add_parser("eval", help="Policz wartość wyrażenia")
    p.add_argument("--text", "-t", help="Wyrażenie (lub stdin)")
    p.add_argument("--steps", "-s", action="store_true",
                   help="Wyświetl kroki obliczeń")
    p.add_argument("--quiet", "-q", action="store_true",
                   help="Tylko wartość, bez tabel")

    # check
    p = sub.add_parser("check", help="Parsuj i waliduj wyrażenie bez obliczania")
    p.add_argument("--text", "-t", help="Wyrażenie (lub stdin)")

    # functions
    sub.add_parser("functions", help="Listuj dostępne funkcje")

    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    cmds = {
        "eval":      _eval,
        "check":     _check,
        "functions": _functions,
    }
    cmds[args.command](args, settings)


if __name__ == "__main__":
    main()
