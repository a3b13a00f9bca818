"""Syntax tree nodes for Go type expressions and their string form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class Ident:
    name: str = ""


@dataclass
class BasicLit:
    value: str = ""


@dataclass
class StarExpr:
    x: Any = None


@dataclass
class ArrayType:
    len: Any = None
    elt: Any = None


@dataclass
class MapType:
    key: Any = None
    value: Any = None


@dataclass
class Field:
    type: Any = None
    names: list[str] = field(default_factory=list)


@dataclass
class StructType:
    fields: Optional[list[Field]] = None


@dataclass
class InterfaceType:
    methods: Optional[list[Field]] = None


@dataclass
class ChanType:
    value: Any = None


@dataclass
class FuncType:
    params: Optional[list[Field]] = None
    results: Optional[list[Field]] = None
    type_params: Optional[list[Field]] = None


@dataclass
class SelectorExpr:
    x: Any = None
    sel: str = ""


@dataclass
class Ellipsis:
    elt: Any = None


@dataclass
class IndexExpr:
    x: Any = None
    index: Any = None


@dataclass
class IndexListExpr:
    x: Any = None
    indices: list[Any] = field(default_factory=list)


@dataclass
class UnaryExpr:
    op: str = ""
    x: Any = None


def _types(fields: Optional[list[Field]]) -> list[str]:
    return [expr_to_string(f.type) for f in fields or []]


def expr_to_string(expr: Any) -> str:
    """Return the compact string form of a type expression."""
    s = expr_to_string
    if expr is None:
        return ""
    if isinstance(expr, MapType):
        return f"map[{s(expr.key)}]{s(expr.value)}"
    if isinstance(expr, ArrayType):
        return f"[{s(expr.len)}]{s(expr.elt)}"
    if isinstance(expr, StructType):
        return "{" + ",".join(_types(expr.fields)) + "}"
    if isinstance(expr, InterfaceType):
        return "{" + ",".join("func " + t for t in _types(expr.methods)) + "}"
    if isinstance(expr, ChanType):
        return f"chan({s(expr.value)})"
    if isinstance(expr, FuncType):
        results = _types(expr.results)
        type_params = _types(expr.type_params)
        generics = f"[{','.join(type_params)}]" if type_params else ""
        head = f"func{generics}({','.join(_types(expr.params))})"
        return f"{head} {','.join(results)}" if results else head
    if isinstance(expr, SelectorExpr):
        return f"{s(expr.x)}.{expr.sel}"
    if isinstance(expr, Ident):
        return expr.name
    if isinstance(expr, StarExpr):
        return f"*{s(expr.x)}"
    if isinstance(expr, Ellipsis):
        return f"{s(expr.elt)}..."
    if isinstance(expr, IndexExpr):
        return f"{s(expr.x)}[{s(expr.index)}]"
    if isinstance(expr, BasicLit):
        return expr.value
    if isinstance(expr, IndexListExpr):
        return ",".join(s(e) for e in expr.indices)
    if isinstance(expr, UnaryExpr):
        return f"{expr.op}{s(expr.x)}"
    raise TypeError(f"Unsupported expr type: {expr!r}")