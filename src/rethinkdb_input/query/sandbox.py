"""
Restricted evaluator for ReQL expression source.

The source is parsed with the standard ``ast`` module and checked against a
whitelist before it is executed with empty builtins. Only the injected
bindings, names the source binds itself (assignment targets, lambda and
comprehension variables) and public attributes are reachable. Attribute reads
are rewritten into guarded lookups that refuse modules, classes and frames.
"""
from __future__ import annotations

import ast
import inspect
from typing import Any, Dict, Mapping, Protocol, Set

RESULT_NAME = "result"
GETATTR_NAME = "__reql_getattr__"

_ALLOWED_STATEMENTS = (ast.Module, ast.Assign, ast.Expr)

_FORBIDDEN_NODES = (
    ast.Import,
    ast.ImportFrom,
    ast.Global,
    ast.Nonlocal,
    ast.FunctionDef,
    ast.AsyncFunctionDef,
    ast.ClassDef,
    ast.Delete,
    ast.Await,
    ast.Yield,
    ast.YieldFrom,
    ast.NamedExpr,
)

# terms that reach a connection
_FORBIDDEN_ATTRIBUTES = frozenset({"run", "repl", "connect"})

# generator, coroutine, frame, traceback and code introspection
_FORBIDDEN_PREFIXES = ("_", "gi_", "cr_", "ag_", "f_", "tb_", "co_")


class SandboxViolation(ValueError):
    """Raised when the source uses a construct outside the allowed subset."""


class QueryEvaluator(Protocol):
    """Turns wrapped query source into the record the source binds to ``result``."""

    def evaluate(self, source: str, bindings: Mapping[str, Any]) -> Mapping[str, Any]:
        ...


def _is_blocked(name: str) -> bool:
    return name.startswith(_FORBIDDEN_PREFIXES) or name in _FORBIDDEN_ATTRIBUTES


def _is_interpreter_object(value: Any) -> bool:
    return (
        inspect.ismodule(value)
        or inspect.isclass(value)
        or inspect.isframe(value)
        or inspect.iscode(value)
        or inspect.istraceback(value)
    )


def guarded_getattr(obj: Any, name: str) -> Any:
    """Attribute lookup that only yields values, never modules, classes or frames."""
    if _is_blocked(name):
        raise SandboxViolation(f"access to attribute '{name}' is not allowed")
    value = getattr(obj, name)
    if _is_interpreter_object(value):
        raise SandboxViolation(f"attribute '{name}' is a {type(value).__name__}, not a query term")
    return value


class _Validator(ast.NodeVisitor):
    def __init__(self, allowed_names: Set[str]):
        self.allowed_names = set(allowed_names)

    def generic_visit(self, node: ast.AST) -> None:
        if isinstance(node, _FORBIDDEN_NODES):
            raise SandboxViolation(f"'{type(node).__name__}' is not allowed in a query")
        if isinstance(node, ast.stmt) and not isinstance(node, _ALLOWED_STATEMENTS):
            raise SandboxViolation(f"'{type(node).__name__}' statements are not allowed in a query")
        super().generic_visit(node)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if _is_blocked(node.attr):
            raise SandboxViolation(f"access to attribute '{node.attr}' is not allowed")
        if not isinstance(node.ctx, ast.Load):
            raise SandboxViolation(f"assignment to attribute '{node.attr}' is not allowed")
        self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if node.id.startswith("_"):
            raise SandboxViolation(f"name '{node.id}' is not allowed")
        if isinstance(node.ctx, ast.Load) and node.id not in self.allowed_names:
            raise SandboxViolation(f"name '{node.id}' is not defined")


class _GuardAttributes(ast.NodeTransformer):
    """Rewrites ``obj.name`` reads into ``__reql_getattr__(obj, 'name')``."""

    def visit_Attribute(self, node: ast.Attribute) -> ast.AST:
        self.generic_visit(node)
        call = ast.Call(
            func=ast.Name(id=GETATTR_NAME, ctx=ast.Load()),
            args=[node.value, ast.Constant(value=node.attr)],
            keywords=[],
        )
        return ast.copy_location(call, node)


def _bound_names(tree: ast.AST) -> Set[str]:
    """Names the source introduces itself."""
    names: Set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store):
            names.add(node.id)
        elif isinstance(node, ast.arg):
            names.add(node.arg)
    return names


class SandboxedEvaluator:
    """Default evaluator: whitelisted Python expression subset, no builtins."""

    def evaluate(self, source: str, bindings: Mapping[str, Any]) -> Mapping[str, Any]:
        tree = ast.parse(source, filename="<reql>", mode="exec")
        _Validator(set(bindings) | _bound_names(tree)).visit(tree)
        tree = ast.fix_missing_locations(_GuardAttributes().visit(tree))

        namespace: Dict[str, Any] = {"__builtins__": {}, GETATTR_NAME: guarded_getattr}
        namespace.update(bindings)
        exec(compile(tree, "<reql>", "exec"), namespace)

        result = namespace.get(RESULT_NAME)
        if not isinstance(result, Mapping):
            raise SandboxViolation(f"query source must bind a '{RESULT_NAME}' record")
        return result
