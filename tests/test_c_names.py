from molkit.c_names import (
    API_DECORATOR,
    builder_prefix,
    default_constant,
    define_builder_function,
    define_builder_macro,
    define_reader_function,
    define_reader_macro,
    gen_import,
    reader_prefix,
)
from molkit.raw_ast import ImportStmt
from molkit.schema import Array, Atom


def _byte3():
    return Array("Byte3", 1, 3, Atom())


def test_prefixes_use_declaration_name():
    decl = _byte3()
    assert reader_prefix(decl) == "MolReader_" + decl.name
    assert builder_prefix(decl) == "MolBuilder_" + decl.name
    assert default_constant(decl) == "MolDefault_" + decl.name


def test_reader_macro_columns():
    decl = _byte3()
    line = define_reader_macro(decl, "_verify(s, c)", "mol_verify_fixed_size(s, 3)")
    assert line.endswith(" mol_verify_fixed_size(s, 3)\n")
    assert line[:39].rstrip() == "#define"
    assert line[40:87].rstrip() == "MolReader_Byte3_verify(s, c)"
    assert line[87] == " "


def test_builder_macro_uses_builder_prefix():
    decl = _byte3()
    line = define_builder_macro(decl, "_build(b)", "mol_builder_finalize_simple(b)")
    assert line.split() == [
        "#define",
        "MolBuilder_Byte3_build(b)",
        "mol_builder_finalize_simple(b)",
    ]


def test_long_macro_signature_is_not_truncated():
    decl = Array("A" * 60, 1, 1, Atom())
    line = define_reader_macro(decl, "_get_nth0(s)", "x")
    assert reader_prefix(decl) + "_get_nth0(s)" in line
    assert line.endswith(" x\n")


def test_reader_function_prototype():
    decl = _byte3()
    line = define_reader_function(
        decl, "_verify", "(const mol_seg_t*, bool)", "mol_errno"
    )
    assert line.startswith(API_DECORATOR)
    assert line.endswith(" (const mol_seg_t*, bool);\n")
    assert line.split()[:3] == [API_DECORATOR, "mol_errno", "MolReader_Byte3_verify"]
    assert line[24:39].rstrip() == "mol_errno"


def test_builder_function_prototype():
    decl = _byte3()
    line = define_builder_function(decl, "_build", "(mol_builder_t)", "mol_seg_res_t")
    assert line.split() == [
        API_DECORATOR,
        "mol_seg_res_t",
        "MolBuilder_Byte3_build",
        "(mol_builder_t);",
    ]


def test_gen_import_with_depth_and_path():
    stmt = ImportStmt("common", ["a", "b"], depth=2)
    assert gen_import(stmt) == '#include "../../a/b/common.h"\n'


def test_gen_import_plain():
    assert gen_import(ImportStmt("common")) == '#include "common.h"\n'