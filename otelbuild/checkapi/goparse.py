"""A declaration-level parser for Go source files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from otelbuild.checkapi.goast import (
    ArrayType,
    BasicLit,
    ChanType,
    Ellipsis,
    Field,
    FuncType,
    Ident,
    IndexExpr,
    IndexListExpr,
    InterfaceType,
    MapType,
    SelectorExpr,
    StarExpr,
    StructType,
    UnaryExpr,
)


class GoSyntaxError(ValueError):
    """Raised when Go source cannot be parsed."""


@dataclass
class ValueSpec:
    """Names declared by a ``var`` or ``const`` spec."""

    names: list[str] = field(default_factory=list)
    type: Any = None


@dataclass
class TypeSpec:
    """A ``type`` declaration."""

    name: str
    type: Any = None


@dataclass
class FuncDecl:
    """A function or method declaration."""

    name: str
    recv: Optional[list[Field]]
    type: FuncType


@dataclass
class GoFile:
    """The declarations of one parsed file."""

    package: str
    imports: list[str] = field(default_factory=list)
    decls: list[Union[ValueSpec, TypeSpec, FuncDecl]] = field(default_factory=list)


@dataclass
class _UnionExpr:
    terms: list[Any]


@dataclass
class _Tok:
    kind: str
    value: str
    line: int


_KEYWORDS = frozenset(
    "break case chan const continue default defer else fallthrough for func go goto if "
    "import interface map package range return select struct switch type var".split()
)

_TOKEN_RE = re.compile(
    r"""
     (?P<ws>[ \t\r\f]+)
    |(?P<nl>\n)
    |(?P<lcomment>//[^\n]*)
    |(?P<bcomment>/\*.*?\*/)
    |(?P<raw>`[^`]*`)
    |(?P<str>"(?:\\.|[^"\\\n])*")
    |(?P<rune>'(?:\\.|[^'\\\n])*')
    |(?P<num>(?:\d|\.\d)(?:[eEpP][+-]|[\w.])*)
    |(?P<ident>[^\W\d]\w*)
    |(?P<op>\.\.\.|<<=|>>=|&\^=|&&|\|\||<-|\+\+|--|==|!=|<=|>=|:=|\+=|-=|\*=|/=|%=|&=|\|=|\^=|<<|>>|&\^|[-+*/%&|^<>=!()\[\]{},;.:~])
    """,
    re.VERBOSE | re.DOTALL,
)

_TYPE_KEYWORDS = frozenset({"map", "chan", "func", "struct", "interface"})


def _needs_semi(tok: Optional[_Tok]) -> bool:
    if tok is None:
        return False
    if tok.kind in ("ident", "lit", "string"):
        return True
    if tok.kind == "keyword":
        return tok.value in ("break", "continue", "fallthrough", "return")
    return tok.kind == "op" and tok.value in ("++", "--", ")", "]", "}")


def _tokenize(source: str) -> list[_Tok]:
    tokens: list[_Tok] = []
    pos, line = 0, 1
    last: Optional[_Tok] = None

    def newline() -> None:
        nonlocal last
        if _needs_semi(last):
            tokens.append(_Tok("op", ";", line))
            last = None

    while pos < len(source):
        m = _TOKEN_RE.match(source, pos)
        if m is None:
            raise GoSyntaxError(f"line {line}: illegal or unterminated text at {source[pos]!r}")
        kind = m.lastgroup
        text = m.group()
        pos = m.end()
        if kind == "ws" or kind == "lcomment":
            continue
        if kind == "nl":
            newline()
            line += 1
            continue
        if kind == "bcomment":
            if "\n" in text:
                newline()
                line += text.count("\n")
            continue
        if kind in ("raw", "str"):
            tok = _Tok("string", text, line)
            line += text.count("\n")
        elif kind in ("num", "rune"):
            tok = _Tok("lit", text, line)
        elif kind == "ident":
            tok = _Tok("keyword" if text in _KEYWORDS else "ident", text, line)
        else:
            tok = _Tok("op", text, line)
        tokens.append(tok)
        last = tok
    newline()
    tokens.append(_Tok("eof", "", line))
    return tokens


class _Parser:
    def __init__(self, source: str) -> None:
        self._toks = _tokenize(source)
        self._pos = 0

    def _peek(self, k: int = 0) -> _Tok:
        return self._toks[min(self._pos + k, len(self._toks) - 1)]

    def _at(self, value: str, kind: str = "op", k: int = 0) -> bool:
        tok = self._peek(k)
        return tok.kind == kind and tok.value == value

    def _accept(self, value: str, kind: str = "op") -> bool:
        if self._at(value, kind):
            self._pos += 1
            return True
        return False

    def _error(self, msg: str) -> GoSyntaxError:
        tok = self._peek()
        return GoSyntaxError(f"line {tok.line}: {msg}, found {tok.value or 'EOF'!r}")

    def _expect(self, value: str, kind: str = "op") -> None:
        if not self._accept(value, kind):
            raise self._error(f"expected {value!r}")

    def _ident(self) -> str:
        tok = self._peek()
        if tok.kind != "ident":
            raise self._error("expected identifier")
        self._pos += 1
        return tok.value

    def _is_type_start(self, k: int = 0) -> bool:
        tok = self._peek(k)
        if tok.kind == "ident":
            return True
        if tok.kind == "keyword":
            return tok.value in _TYPE_KEYWORDS
        return tok.kind == "op" and tok.value in ("*", "[", "(", "<-")

    # file level

    def parse_file(self, imports_only: bool) -> GoFile:
        self._expect("package", "keyword")
        package = self._ident()
        self._end_decl()
        imports: list[str] = []
        while self._accept("import", "keyword"):
            if self._accept("("):
                while not self._at(")"):
                    imports.append(self._import_spec())
                    if not self._accept(";") and not self._at(")"):
                        raise self._error("expected ';' or ')'")
                self._expect(")")
            else:
                imports.append(self._import_spec())
            self._end_decl()
        result = GoFile(package, imports)
        if imports_only:
            return result
        while self._peek().kind != "eof":
            tok = self._peek()
            self._pos += 1
            if tok.kind == "keyword" and tok.value in ("var", "const"):
                result.decls.extend(self._group(self._value_spec))
            elif tok.kind == "keyword" and tok.value == "type":
                result.decls.extend(self._group(self._type_spec))
            elif tok.kind == "keyword" and tok.value == "func":
                result.decls.append(self._func_decl())
            else:
                self._pos -= 1
                raise self._error("expected declaration")
            self._end_decl()
        return result

    def _end_decl(self) -> None:
        if not self._accept(";") and self._peek().kind != "eof":
            raise self._error("expected ';'")

    def _import_spec(self) -> str:
        if self._peek().kind == "ident" or self._at("."):
            self._pos += 1
        tok = self._peek()
        if tok.kind != "string":
            raise self._error("expected import path")
        self._pos += 1
        return tok.value[1:-1]

    def _group(self, spec):
        if self._accept("("):
            specs = []
            while not self._at(")"):
                specs.append(spec())
                if not self._accept(";") and not self._at(")"):
                    raise self._error("expected ';' or ')'")
            self._expect(")")
            return specs
        return [spec()]

    def _skip_expr(self, stop: frozenset) -> list[_Tok]:
        depth = 0
        skipped = []
        while True:
            tok = self._peek()
            if tok.kind == "eof":
                if depth:
                    raise self._error("unexpected end of file")
                return skipped
            if tok.kind == "op":
                if depth == 0 and tok.value in stop:
                    return skipped
                if tok.value in "([{":
                    depth += 1
                elif tok.value in ")]}":
                    depth -= 1
            skipped.append(tok)
            self._pos += 1

    def _value_spec(self) -> ValueSpec:
        names = [self._ident()]
        while self._accept(","):
            names.append(self._ident())
        typ = None
        if not (self._at(";") or self._at(")") or self._at("=")):
            typ = self.parse_type()
        if self._accept("="):
            if not self._skip_expr(frozenset({";", ")"})):
                raise self._error("expected expression")
        return ValueSpec(names, typ)

    def _type_spec(self) -> TypeSpec:
        name = self._ident()
        if (
            self._at("[")
            and self._peek(1).kind == "ident"
            and not self._at("]", k=2)
        ):
            self._param_list("[", "]", constraint=True)
        self._accept("=")
        return TypeSpec(name, self.parse_type())

    def _func_decl(self) -> FuncDecl:
        recv = self._param_list("(", ")") if self._at("(") else None
        name = self._ident()
        type_params = self._param_list("[", "]", constraint=True) if self._at("[") else None
        params = self._param_list("(", ")")
        results = self._results()
        if self._at("{"):
            self._skip_block()
        return FuncDecl(name, recv, FuncType(params, results, type_params))

    def _skip_block(self) -> None:
        self._expect("{")
        depth = 1
        while depth:
            tok = self._peek()
            if tok.kind == "eof":
                raise self._error("unterminated block")
            if tok.kind == "op":
                if tok.value == "{":
                    depth += 1
                elif tok.value == "}":
                    depth -= 1
            self._pos += 1

    def _results(self) -> Optional[list[Field]]:
        if not self._is_type_start():
            return None
        if self._at("("):
            return self._param_list("(", ")")
        return [Field(type=self.parse_type())]

    # types

    def parse_type(self) -> Any:
        tok = self._peek()
        if tok.kind == "ident":
            self._pos += 1
            expr: Any = Ident(tok.value)
            if self._accept("."):
                expr = SelectorExpr(expr, self._ident())
            if self._accept("["):
                args = [self.parse_type()]
                while self._accept(","):
                    if self._at("]"):
                        break
                    args.append(self.parse_type())
                self._expect("]")
                expr = IndexExpr(expr, args[0]) if len(args) == 1 else IndexListExpr(expr, args)
            return expr
        if self._accept("("):
            inner = self.parse_type()
            self._expect(")")
            return inner
        if self._accept("*"):
            return StarExpr(self.parse_type())
        if self._accept("["):
            if self._accept("]"):
                return ArrayType(None, self.parse_type())
            if self._accept("..."):
                self._expect("]")
                return ArrayType(Ellipsis(), self.parse_type())
            length = self._skip_expr(frozenset({"]"}))
            if not length:
                raise self._error("expected array length")
            self._expect("]")
            if len(length) == 1 and length[0].kind == "ident":
                len_expr: Any = Ident(length[0].value)
            else:
                len_expr = BasicLit(" ".join(t.value for t in length))
            return ArrayType(len_expr, self.parse_type())
        if self._accept("map", "keyword"):
            self._expect("[")
            key = self.parse_type()
            self._expect("]")
            return MapType(key, self.parse_type())
        if self._accept("chan", "keyword"):
            self._accept("<-")
            return ChanType(self.parse_type())
        if self._accept("<-"):
            self._expect("chan", "keyword")
            return ChanType(self.parse_type())
        if self._accept("func", "keyword"):
            params = self._param_list("(", ")")
            return FuncType(params, self._results())
        if self._accept("struct", "keyword"):
            return StructType(self._struct_fields())
        if self._accept("interface", "keyword"):
            return InterfaceType(self._interface_methods())
        raise self._error("expected type")

    def _constraint(self) -> Any:
        terms = [self._term()]
        while self._accept("|"):
            terms.append(self._term())
        return terms[0] if len(terms) == 1 else _UnionExpr(terms)

    def _term(self) -> Any:
        if self._accept("~"):
            return UnaryExpr("~", self.parse_type())
        return self.parse_type()

    def _struct_fields(self) -> list[Field]:
        self._expect("{")
        fields = []
        while not self._at("}"):
            tok = self._peek()
            if self._at("*"):
                names: list[str] = []
                typ = self.parse_type()
            elif tok.kind == "ident":
                nxt = self._peek(1)
                if nxt.kind == "string" or (nxt.kind == "op" and nxt.value in (";", "}", ".")):
                    names, typ = [], self.parse_type()
                else:
                    names = [self._ident()]
                    while self._accept(","):
                        names.append(self._ident())
                    typ = self.parse_type()
            else:
                raise self._error("expected field")
            if self._peek().kind == "string":
                self._pos += 1
            fields.append(Field(type=typ, names=names))
            if not self._accept(";") and not self._at("}"):
                raise self._error("expected ';' or '}'")
        self._expect("}")
        return fields

    def _interface_methods(self) -> list[Field]:
        self._expect("{")
        methods = []
        while not self._at("}"):
            if self._peek().kind == "ident" and self._at("(", k=1):
                name = self._ident()
                params = self._param_list("(", ")")
                methods.append(Field(type=FuncType(params, self._results()), names=[name]))
            else:
                methods.append(Field(type=self._constraint()))
            if not self._accept(";") and not self._at("}"):
                raise self._error("expected ';' or '}'")
        self._expect("}")
        return methods

    def _matching_bracket(self, k: int) -> int:
        depth = 0
        while True:
            tok = self._peek(k)
            if tok.kind == "eof":
                raise self._error("unbalanced brackets")
            if tok.kind == "op" and tok.value in "([{":
                depth += 1
            elif tok.kind == "op" and tok.value in ")]}":
                depth -= 1
                if depth == 0:
                    return k
            k += 1

    def _param_type(self, constraint: bool) -> Any:
        if self._accept("..."):
            return Ellipsis(self.parse_type())
        return self._constraint() if constraint else self.parse_type()

    def _param_item(self, close: str, constraint: bool) -> tuple[Optional[str], Any]:
        tok = self._peek()
        if tok.kind != "ident":
            return None, self._param_type(constraint)
        nxt = self._peek(1)
        if nxt.kind == "op" and nxt.value in (",", close):
            self._pos += 1
            return tok.value, None
        if nxt.kind == "op" and nxt.value == ".":
            return None, self._param_type(constraint)
        if nxt.kind == "op" and nxt.value == "[":
            if self._at("]", k=2):
                named = True
            else:
                after = self._peek(self._matching_bracket(1) + 1)
                named = not (after.kind == "op" and after.value in (",", close, "|"))
        else:
            named = self._is_type_start(1) or (nxt.kind == "op" and nxt.value in ("...", "~"))
        if not named:
            return None, self._param_type(constraint)
        self._pos += 1
        return tok.value, self._param_type(constraint)

    def _param_list(self, open_: str, close: str, constraint: bool = False) -> list[Field]:
        self._expect(open_)
        items = []
        while not self._at(close):
            items.append(self._param_item(close, constraint))
            if not self._accept(","):
                break
        self._expect(close)

        if not any(name is not None and typ is not None for name, typ in items):
            return [Field(type=typ if typ is not None else Ident(name)) for name, typ in items]
        fields, pending = [], []
        for name, typ in items:
            if typ is None:
                pending.append(name)
            elif name is None:
                raise self._error("mixed named and unnamed parameters")
            else:
                fields.append(Field(type=typ, names=pending + [name]))
                pending = []
        if pending:
            raise self._error("missing parameter type")
        return fields


def parse_source(source: str) -> GoFile:
    """Parse a Go source file into its top-level declarations."""
    return _Parser(source).parse_file(imports_only=False)


def parse_imports(source: str) -> list[str]:
    """Parse only the package clause and imports of a Go file."""
    return _Parser(source).parse_file(imports_only=True).imports