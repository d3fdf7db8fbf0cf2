#!/usr/bin/env python
"""Require `__all__` to be assigned once, as the last top-level statement.

Modules without `__all__` are skipped. Mutating `__all__` (augmented
assignment, `.append`/`.extend`, `del`) is rejected.
"""

from __future__ import annotations

import ast
import sys
import argparse
from pathlib import Path

DEFAULT_DIRS = ("cmu_bridge", "tests")


def _is_all(node: ast.AST) -> bool:
    return isinstance(node, ast.Name) and node.id == "__all__"


def _is_single_assignment(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return len(node.targets) == 1 and _is_all(node.targets[0])
    if isinstance(node, ast.AnnAssign):
        return _is_all(node.target) and node.value is not None
    return False


def _mutates_all(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return any(_is_all(target) for target in node.targets) and not _is_single_assignment(node)
    if isinstance(node, ast.AugAssign):
        return _is_all(node.target)
    if isinstance(node, ast.Delete):
        return any(_is_all(target) for target in node.targets)
    if isinstance(node, ast.Expr) and isinstance(node.value, ast.Call):
        func = node.value.func
        return isinstance(func, ast.Attribute) and _is_all(func.value)
    return False


def violations_in(source: str, label: str) -> list[str]:
    try:
        tree = ast.parse(source)
    except SyntaxError:
        return []

    assignments = [idx for idx, node in enumerate(tree.body) if _is_single_assignment(node)]
    mutations = [node for node in tree.body if _mutates_all(node)]
    if not assignments and not mutations:
        return []

    violations = [f"  {label}:{node.lineno} `__all__` is mutated; assign it once at the bottom" for node in mutations]
    if len(assignments) != 1:
        if not assignments:
            violations.append(f"  {label}: `__all__` must be set by a single top-level assignment")
        else:
            violations.extend(f"  {label}:{tree.body[idx].lineno} multiple `__all__` assignments" for idx in assignments)
        return violations

    value = tree.body[assignments[0]].value
    if value is not None and any(_is_all(node) for node in ast.walk(value)):
        violations.append(f"  {label}:{value.lineno} `__all__` must not be built from itself")

    for node in tree.body[assignments[0] + 1 :]:
        violations.append(f"  {label}:{node.lineno} {type(node).__name__} after `__all__`")
    return violations


def collect_violations(root: Path, dirs: tuple[str, ...] = DEFAULT_DIRS) -> list[str]:
    violations: list[str] = []
    for name in dirs:
        scan_dir = root / name
        if not scan_dir.is_dir():
            continue
        for py_file in sorted(scan_dir.rglob("*.py")):
            if "__pycache__" in py_file.parts:
                continue
            try:
                source = py_file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            violations.extend(violations_in(source, str(py_file.relative_to(root))))
    return violations


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Enforce that __all__ is defined once and placed at module bottom.")
    parser.add_argument("--dirs", nargs="+", default=list(DEFAULT_DIRS), help="Directories to scan")
    parser.add_argument("--root", default=".", help="Project root (default: .)")
    args = parser.parse_args(argv)

    violations = collect_violations(Path(args.root).resolve(), tuple(args.dirs))
    if violations:
        print("__all__ placement violations:", file=sys.stderr)
        for violation in violations:
            print(violation, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
