#!/usr/bin/env python
"""Cap package modules at 300 code lines.

Blank lines, comment-only lines and docstrings do not count. Barrel
`__init__.py` files (imports and `__all__` only) are exempt.
"""

from __future__ import annotations

import io
import ast
import sys
import tokenize
from pathlib import Path

LIMIT = 300

ROOT = Path(__file__).resolve().parents[1]
PACKAGE_DIR = ROOT / "cmu_bridge"


def _comment_lines(source: str) -> set[int]:
    lines: set[int] = set()
    try:
        for tok in tokenize.generate_tokens(io.StringIO(source).readline):
            if tok.type == tokenize.COMMENT:
                lines.add(tok.start[0])
    except tokenize.TokenError:
        pass
    return lines


def _docstring_lines(tree: ast.Module) -> set[int]:
    lines: set[int] = set()
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Module, ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        first = node.body[0] if node.body else None
        if isinstance(first, ast.Expr) and isinstance(first.value, ast.Constant) and isinstance(first.value.value, str):
            lines.update(range(first.lineno, (first.end_lineno or first.lineno) + 1))
    return lines


def _is_barrel(tree: ast.Module) -> bool:
    for node in tree.body:
        if isinstance(node, (ast.Import, ast.ImportFrom, ast.Pass)):
            continue
        if isinstance(node, ast.Assign) and [getattr(t, "id", None) for t in node.targets] == ["__all__"]:
            continue
        if isinstance(node, ast.Expr) and isinstance(node.value, ast.Constant):
            continue
        return False
    return True


def count_code_lines(source: str, *, is_init: bool = False) -> int:
    try:
        tree = ast.parse(source)
    except SyntaxError:
        return 0
    if is_init and _is_barrel(tree):
        return 0

    skipped = _comment_lines(source) | _docstring_lines(tree)
    return sum(
        1 for line_no, line in enumerate(source.splitlines(), start=1) if line.strip() and line_no not in skipped
    )


def collect_violations(package_dir: Path = PACKAGE_DIR, limit: int = LIMIT) -> list[str]:
    violations: list[str] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        if "__pycache__" in py_file.parts:
            continue
        try:
            source = py_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        code_lines = count_code_lines(source, is_init=py_file.name == "__init__.py")
        if code_lines > limit:
            violations.append(f"  {py_file.relative_to(package_dir.parent)}: {code_lines} code lines (limit {limit})")
    return violations


def main() -> int:
    violations = collect_violations()
    if violations:
        print("File length violations:", file=sys.stderr)
        for violation in violations:
            print(violation, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
