from pathlib import Path

import pytest

from molkit.raw_ast import (
    ArrayDecl,
    FieldDecl,
    ImportStmt,
    ItemDecl,
    OptionDecl,
    RawAst,
    StructDecl,
    TableDecl,
    UnionDecl,
    VectorDecl,
)


def _sample_decls():
    return [
        ArrayDecl("Byte3", "byte", 3),
        StructDecl("StructA", [FieldDecl("f1", "byte"), FieldDecl("f2", "Byte3")]),
        VectorDecl("Bytes", "byte"),
        OptionDecl("BytesOpt", "Bytes"),
        UnionDecl("UnionA", [ItemDecl("byte"), ItemDecl("Bytes")]),
        TableDecl("Table1", [FieldDecl("f1", "byte")]),
    ]


def test_names_keep_declaration_order():
    ast = RawAst(namespace="ci_tests")
    decls = _sample_decls()
    for decl in decls:
        ast.add_decl(decl)
    assert ast.names() == [d.name for d in decls]
    assert ast.decls == decls
    assert ast.namespace == "ci_tests"


def test_empty_ast():
    ast = RawAst()
    assert ast.names() == []
    assert ast.imports == []


def test_add_import():
    ast = RawAst()
    stmt = ImportStmt("common", ["sub"], 1, Path("schemas"), 0)
    ast.add_import(stmt)
    assert ast.imports == [stmt]
    assert ast.imports[0].path == ["sub"]


def test_separate_asts_do_not_share_lists():
    first, second = RawAst(), RawAst()
    first.add_decl(VectorDecl("Words", "Word"))
    assert second.decls == []
    assert first.names() == ["Words"]


@pytest.mark.parametrize("bad", [FieldDecl("f", "byte"), ItemDecl("byte"), "Bytes"])
def test_add_decl_rejects_non_top_decl(bad):
    ast = RawAst()
    with pytest.raises(TypeError):
        ast.add_decl(bad)
    assert ast.decls == []


def test_add_import_rejects_other_objects():
    with pytest.raises(TypeError):
        RawAst().add_import(VectorDecl("Bytes", "byte"))


def test_union_items_keep_types():
    union = UnionDecl("UnionA", [ItemDecl("byte"), ItemDecl("Word")], imported_depth=2)
    assert [item.typ for item in union.inner] == ["byte", "Word"]
    assert union.imported_depth == 2