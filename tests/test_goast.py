import pytest

from otelbuild.checkapi.goast import (
    ArrayType,
    BasicLit,
    ChanType,
    Ellipsis,
    Field,
    FuncType,
    Ident,
    IndexExpr,
    InterfaceType,
    MapType,
    SelectorExpr,
    StarExpr,
    StructType,
    expr_to_string,
)

CASES = [
    (None, ""),
    (StarExpr(), "*"),
    (ArrayType(elt=Ident("string")), "[]string"),
    (MapType(key=Ident("string"), value=Ident("string")), "map[string]string"),
    (
        MapType(key=Ident("string"), value=StructType(fields=[Field(type=Ident("string"))])),
        "map[string]{string}",
    ),
    (FuncType(params=[]), "func()"),
    (
        FuncType(
            params=[Field(type=Ident("bool"), names=["foo"])],
            results=[Field(type=Ident("int"), names=["foo"])],
        ),
        "func(bool) int",
    ),
    (BasicLit("1"), "1"),
    (Ellipsis(), "..."),
    (IndexExpr(), "[]"),
    (IndexExpr(x=Ident("foo"), index=BasicLit("1")), "foo[1]"),
    (SelectorExpr(x=Ident("foo"), sel="bar"), "foo.bar"),
    (InterfaceType(methods=[Field(type=FuncType(params=[]))]), "{func func()}"),
    (ChanType(value=Ident("string")), "chan(string)"),
    (
        FuncType(
            type_params=[Field(type=Ident("T ~string"), names=["T"])],
            params=[Field(type=Ident("T"), names=["foo"])],
        ),
        "func[T ~string](T)",
    ),
]


@pytest.mark.parametrize("expr,expected", CASES)
def test_expr_to_string(expr, expected):
    assert expr_to_string(expr) == expected


def test_unsupported_expression_raises():
    with pytest.raises(TypeError):
        expr_to_string(object())