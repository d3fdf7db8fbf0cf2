#!/usr/bin/env python
"""Reject module-level singleton state in the package.

Channels, clients and registries are constructed with injected settings;
nothing may cache a process-wide instance.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE_DIR = ROOT / "cmu_bridge"

SINGLETON_CLASS_SUFFIX = "Singleton"
SINGLETON_FN_NAMES = {"get_instance", "reset_instance", "get_channel", "get_registry"}
SINGLETON_STATE_NAMES = {"_STATE", "STATE", "_INSTANCE", "INSTANCE"}


def _names(node: ast.Assign | ast.AnnAssign) -> list[str]:
    targets = [node.target] if isinstance(node, ast.AnnAssign) else node.targets
    return [target.id for target in targets if isinstance(target, ast.Name)]


def _is_singleton_state(node: ast.Assign | ast.AnnAssign) -> bool:
    names = _names(node)
    value = node.value
    if not names or value is None:
        return False
    if any(name in SINGLETON_STATE_NAMES for name in names):
        return isinstance(value, ast.Dict) and any(
            isinstance(key, ast.Constant) and key.value == "instance" for key in value.keys
        )
    if isinstance(value, ast.Constant) and value.value is None:
        return any(name.lower().endswith("_instance") for name in names)
    return False


def violations_in(source: str, label: str) -> list[str]:
    try:
        tree = ast.parse(source)
    except SyntaxError:
        return []

    violations: list[str] = []
    for node in tree.body:
        if isinstance(node, ast.ClassDef) and node.name.endswith(SINGLETON_CLASS_SUFFIX):
            violations.append(f"  {label}:{node.lineno} class `{node.name}` uses singleton naming")
        elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name in SINGLETON_FN_NAMES:
            violations.append(f"  {label}:{node.lineno} function `{node.name}` suggests singleton lifecycle")
        elif isinstance(node, (ast.Assign, ast.AnnAssign)) and _is_singleton_state(node):
            violations.append(f"  {label}:{node.lineno} singleton module state: {', '.join(_names(node))}")
    return violations


def collect_violations(package_dir: Path = PACKAGE_DIR) -> list[str]:
    violations: list[str] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        if "__pycache__" in py_file.parts:
            continue
        try:
            source = py_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        violations.extend(violations_in(source, str(py_file.relative_to(package_dir.parent))))
    return violations


def main() -> int:
    if not PACKAGE_DIR.is_dir():
        print(f"[no-runtime-singletons] Missing package directory: {PACKAGE_DIR}", file=sys.stderr)
        return 1

    violations = collect_violations()
    if not violations:
        return 0

    print("Runtime singleton pattern violations:", file=sys.stderr)
    for violation in violations:
        print(violation, file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
