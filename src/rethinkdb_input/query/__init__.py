from .compiler import QueryCompiler, build_query_source, wrap_query, PLAN_KEY
from .namespace import BuilderNamespace, builder_names
from .sandbox import QueryEvaluator, SandboxedEvaluator, SandboxViolation

__all__ = [
    "QueryCompiler",
    "build_query_source",
    "wrap_query",
    "PLAN_KEY",
    "BuilderNamespace",
    "builder_names",
    "QueryEvaluator",
    "SandboxedEvaluator",
    "SandboxViolation",
]
