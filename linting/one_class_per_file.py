#!/usr/bin/env python
"""Allow at most one top-level non-dataclass class per package module."""

from __future__ import annotations

import ast
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE_DIR = ROOT / "cmu_bridge"


def _decorator_name(decorator: ast.expr) -> str | None:
    target = decorator.func if isinstance(decorator, ast.Call) else decorator
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, ast.Attribute):
        return target.attr
    return None


def non_dataclass_classes(source: str) -> list[str]:
    try:
        tree = ast.parse(source)
    except SyntaxError:
        return []
    return [
        node.name
        for node in tree.body
        if isinstance(node, ast.ClassDef)
        and not any(_decorator_name(decorator) == "dataclass" for decorator in node.decorator_list)
    ]


def collect_violations(package_dir: Path = PACKAGE_DIR) -> list[str]:
    violations: list[str] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        if "__pycache__" in py_file.parts:
            continue
        try:
            classes = non_dataclass_classes(py_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            continue
        if len(classes) > 1:
            rel = py_file.relative_to(package_dir.parent)
            violations.append(f"  {rel}: {len(classes)} classes ({', '.join(classes)})")
    return violations


def main() -> int:
    violations = collect_violations()
    if violations:
        print("One non-dataclass-class-per-file violations:", file=sys.stderr)
        for violation in violations:
            print(violation, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
