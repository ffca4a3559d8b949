from __future__ import annotations

import ast
import collections.abc
import inspect
import logging
import re
import typing
from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence

from pathspec import PathSpec

from ..decorators import declared_step_args
from ..models import MethodDescriptor, MethodNameMatcher, ScenarioSymbol


logger = logging.getLogger(__name__)

_TEXT_SEQUENCE_ORIGINS = {
    collections.abc.Iterable,
    collections.abc.Iterator,
    collections.abc.Generator,
}
_TEXT_SEQUENCE_STR_RE = re.compile(
    r"^(?:typing\.|collections\.abc\.|t\.)?(?:Iterable|Iterator|Generator)\[\s*str\s*[\],]"
)


def returns_its_text(func: Callable[..., Any]) -> bool:
    """True when ``func`` is annotated to return a lazy sequence of strings."""
    try:
        annotation = typing.get_type_hints(func).get("return")
    except (NameError, TypeError):
        # unresolved forward references; fall back to the raw annotation
        annotation = getattr(func, "__annotations__", {}).get("return")

    if annotation is None:
        return False
    if isinstance(annotation, str):
        # postponed evaluation keeps quoted annotations quoted
        return bool(_TEXT_SEQUENCE_STR_RE.match(annotation.strip().strip("'\"")))

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    return origin in _TEXT_SEQUENCE_ORIGINS and bool(args) and args[0] is str


def describe_methods(cls: type) -> List[MethodDescriptor]:
    """Public methods of ``cls`` in definition order, base classes first."""
    functions: Dict[str, Callable[..., Any]] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, value in vars(klass).items():
            if name.startswith("_"):
                continue
            if inspect.isfunction(value):
                functions[name] = value
            else:
                functions.pop(name, None)

    return [
        MethodDescriptor(
            name=name,
            function=func,
            returns_its_text=returns_its_text(func),
            arg_variants=declared_step_args(func),
        )
        for name, func in functions.items()
    ]


def _build_ignore_spec(ignore_globs: List[str]) -> PathSpec:
    return PathSpec.from_lines("gitwildmatch", ignore_globs)


def _module_name(root: Path, path: Path) -> str:
    parts = list(path.relative_to(root).with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


def discover_scenarios(
    root: Path,
    matchers: Sequence[MethodNameMatcher],
    ignore_globs: List[str],
) -> List[ScenarioSymbol]:
    ignore_spec = _build_ignore_spec(ignore_globs)
    symbols: List[ScenarioSymbol] = []

    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if ignore_spec.match_file(str(rel)):
            continue
        if path.is_dir():
            continue
        symbols.extend(_discover_python(root, path, matchers))

    return symbols


def _discover_python(root: Path, file_path: Path, matchers: Sequence[MethodNameMatcher]) -> List[ScenarioSymbol]:
    source = file_path.read_text(encoding="utf-8", errors="ignore")
    try:
        tree = ast.parse(source)
    except SyntaxError as exc:
        logger.warning("Skipping %s: %s", file_path, exc)
        return []

    module_qual = _module_name(root, file_path)
    symbols: List[ScenarioSymbol] = []
    for node in tree.body:
        if not isinstance(node, ast.ClassDef) or node.name.startswith("_"):
            continue
        step_methods = [
            member.name
            for member in node.body
            if isinstance(member, ast.FunctionDef)
            and not member.name.startswith("_")
            and any(m.is_method_of_interest(member.name) for m in matchers)
        ]
        if not step_methods:
            continue
        symbols.append(
            ScenarioSymbol(
                name=node.name,
                qualified_name=f"{module_qual}.{node.name}" if module_qual else node.name,
                file_path=str(file_path),
                step_methods=step_methods,
            )
        )
    return symbols
