import pytest

from otelbuild.checkapi.goast import expr_to_string
from otelbuild.checkapi.goparse import (
    FuncDecl,
    GoSyntaxError,
    TypeSpec,
    ValueSpec,
    parse_imports,
    parse_source,
)

UNKEYED = """// comment
package unkeyedreceiver

import (
\t"context"

\t"go.opentelemetry.io/collector/receiver"
)

func NewFactory() receiver.Factory {
\treturn nil
}

type MyInterface interface {
\tFoo() string
}

type UnkeyedConfig struct {
\tFoo     []string
\tBar     map[string]string
\tBool    bool
\tStrChan chan string
}

type ShutdownFunc func(context.Context) error

type FooWithAnonymousField struct {
\tData string
\t_    struct{}
}

type EmptyStruct struct{}

type privateStruct struct {
\tFoo string `yaml:"foo"`
}
"""


def _types(gofile):
    return {d.name: d for d in gofile.decls if isinstance(d, TypeSpec)}


def test_package_and_imports():
    gofile = parse_source(UNKEYED)
    assert gofile.package == "unkeyedreceiver"
    assert gofile.imports == ["context", "go.opentelemetry.io/collector/receiver"]
    assert parse_imports(UNKEYED) == gofile.imports


def test_type_declarations_in_order():
    names = [d.name for d in parse_source(UNKEYED).decls if isinstance(d, TypeSpec)]
    assert names == [
        "MyInterface",
        "UnkeyedConfig",
        "ShutdownFunc",
        "FooWithAnonymousField",
        "EmptyStruct",
        "privateStruct",
    ]


def test_struct_fields():
    cfg = _types(parse_source(UNKEYED))["UnkeyedConfig"].type
    assert [f.names for f in cfg.fields] == [["Foo"], ["Bar"], ["Bool"], ["StrChan"]]
    assert [expr_to_string(f.type) for f in cfg.fields] == [
        "[]string",
        "map[string]string",
        "bool",
        "chan(string)",
    ]
    assert _types(parse_source(UNKEYED))["EmptyStruct"].type.fields == []


def test_function_results():
    funcs = [d for d in parse_source(UNKEYED).decls if isinstance(d, FuncDecl)]
    assert [f.name for f in funcs] == ["NewFactory"]
    assert funcs[0].recv is None
    assert [expr_to_string(r.type) for r in funcs[0].type.results] == ["receiver.Factory"]


def test_generic_function():
    src = "package p\nfunc ThisFuncWillError[T ~string](foo T) T {\n\treturn T(\"foo\")\n}\n"
    (fn,) = parse_source(src).decls
    assert expr_to_string(fn.type) == "func[~string](T) T"
    assert fn.type.type_params[0].names == ["T"]


def test_grouped_parameters_share_one_field():
    src = "package p\nfunc F(a, b int, c string) {}\n"
    (fn,) = parse_source(src).decls
    assert [f.names for f in fn.type.params] == [["a", "b"], ["c"]]


def test_method_receiver():
    src = "package p\nfunc (c *Config) Start(x ...string) (int, error) { s := \"}\"; _ = s; return 0, nil }\n"
    (fn,) = parse_source(src).decls
    assert fn.name == "Start"
    assert fn.recv[0].names == ["c"]
    assert len(fn.type.results) == 2


def test_value_specs():
    src = "package p\nconst (\n\tA = iota\n\tb\n)\nvar X, Y = map[string]int{\"a\": 1}, 2\n"
    specs = [d for d in parse_source(src).decls if isinstance(d, ValueSpec)]
    assert [s.names for s in specs] == [["A"], ["b"], ["X", "Y"]]


def test_imports_only_ignores_body_errors():
    src = 'package p\nimport "fmt"\nthis is not go\n'
    assert parse_imports(src) == ["fmt"]
    with pytest.raises(GoSyntaxError):
        parse_source(src)


def test_missing_package_clause():
    with pytest.raises(GoSyntaxError):
        parse_source("func F() {}\n")


def test_unterminated_string():
    with pytest.raises(GoSyntaxError):
        parse_source('package p\nvar s = "abc\n')