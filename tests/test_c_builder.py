import pytest

from molkit.c_builder import (
    builder_functions,
    builder_interfaces,
    calculate_capacity,
    default_value,
)
from molkit.c_names import define_builder_function, define_builder_macro
from molkit.numbers import NUMBER_SIZE
from molkit.raw_ast import (
    ArrayDecl,
    FieldDecl,
    ItemDecl,
    OptionDecl,
    RawAst,
    StructDecl,
    TableDecl,
    UnionDecl,
    VectorDecl,
)
from molkit.schema import Ast, Atom


@pytest.fixture
def decls():
    raw = RawAst(
        "ci_tests",
        decls=[
            ArrayDecl("Byte3", "byte", 3),
            VectorDecl("Bytes", "byte"),
            VectorDecl("BytesVec", "Bytes"),
            StructDecl("StructA", [FieldDecl("f1", "byte"), FieldDecl("f2", "Byte3")]),
            OptionDecl("BytesOpt", "Bytes"),
            UnionDecl("UnionA", [ItemDecl("byte"), ItemDecl("Bytes")]),
            TableDecl("Table1", [FieldDecl("f1", "byte")]),
            TableDecl("Table2", [FieldDecl("f1", "byte"), FieldDecl("f2", "Bytes")]),
        ],
    )
    return {decl.name: decl for decl in Ast.from_raw(raw).decls}


@pytest.mark.parametrize("used", range(1, 1025))
def test_capacity_is_smallest_power_of_two(used):
    capacity = calculate_capacity(used)
    assert capacity & (capacity - 1) == 0
    assert used <= capacity < 2 * used


def test_capacity_of_zero_is_one():
    assert calculate_capacity(0) == 1


def test_capacity_rejects_negative():
    with pytest.raises(ValueError):
        calculate_capacity(-1)


def test_array_interfaces(decls):
    byte3 = decls["Byte3"]
    text = builder_interfaces(byte3)
    assert define_builder_macro(
        byte3, "_init(b)", "mol_builder_initialize_fixed_size(b, 3)"
    ) in text
    for i in range(3):
        assert f"MolBuilder_Byte3_set_nth{i}(b, p)" in text
    assert "mol_builder_set_byte_by_offset(b, 2, p)" in text
    assert define_builder_macro(
        byte3, "_build(b)", "mol_builder_finalize_simple(b)"
    ) in text
    assert text.endswith(
        define_builder_macro(byte3, "_clear(b)", "mol_builder_discard(b)")
    )
    assert all(line.startswith("#define") for line in text.splitlines())


def test_struct_interfaces_use_field_offsets(decls):
    struct = decls["StructA"]
    text = builder_interfaces(struct)
    assert "mol_builder_set_byte_by_offset(b, 0, p)" in text
    assert "mol_builder_set_by_offset(b, 1, p, 3)" in text


def test_fixvec_and_dynvec_interfaces(decls):
    bytes_text = builder_interfaces(decls["Bytes"])
    assert "mol_fixvec_builder_push_byte(b, p)" in bytes_text
    assert "mol_fixvec_builder_finalize(b)" in bytes_text
    dynvec_text = builder_interfaces(decls["BytesVec"])
    assert "mol_dynvec_builder_push(b, p, l)" in dynvec_text
    assert "mol_dynvec_builder_finalize(b)" in dynvec_text
    number_capacity = calculate_capacity(NUMBER_SIZE * 16)
    assert f", {number_capacity})" in dynvec_text


def test_union_interfaces(decls):
    union = decls["UnionA"]
    text = builder_interfaces(union)
    capacity = calculate_capacity(NUMBER_SIZE + 1)
    assert f"mol_union_builder_initialize(b, {capacity}, 0, NULL, 1)" in text
    assert "MolBuilder_UnionA_set_byte(b, p)" in text
    assert "mol_union_builder_set_byte(b, 0, p)" in text
    assert "MolBuilder_UnionA_set_Bytes(b, p, l)" in text
    assert "mol_union_builder_set(b, 1, p, l)" in text


def test_option_interfaces(decls):
    text = builder_interfaces(decls["BytesOpt"])
    assert "mol_option_builder_set(b, p, l)" in text
    assert "mol_builder_initialize_fixed_size(b, 0)" in text


def test_table_interfaces_declare_build_function(decls):
    table = decls["Table2"]
    text = builder_interfaces(table)
    assert define_builder_function(
        table, "_build", "(mol_builder_t)", "mol_seg_res_t"
    ) in text
    assert "mol_table_builder_add_byte(b, 0, p)" in text
    assert "mol_table_builder_add(b, 1, p, l)" in text


def test_only_tables_have_builder_functions(decls):
    for name in ("Byte3", "Bytes", "BytesVec", "StructA", "BytesOpt", "UnionA"):
        assert builder_functions(decls[name]) == ""


def test_table_build_function(decls):
    text = builder_functions(decls["Table2"])
    lines = text.splitlines()
    assert lines[0].startswith("MOLECULE_API_DECORATOR mol_seg_res_t MolBuilder_Table2_build")
    assert lines[-1] == "}"
    assert "        *dst = 0;" in lines
    assert "        memcpy(dst, &MolDefault_Bytes, len);" in lines
    assert "    mol_builder_discard(builder);" in lines
    assert all(line == line.rstrip() for line in lines)


def test_atom_has_no_builder():
    with pytest.raises(TypeError):
        builder_interfaces(Atom())
    with pytest.raises(TypeError):
        builder_functions(Atom())


def test_default_value_short(decls):
    text = default_value(decls["Byte3"])
    assert text.endswith("{____, ____, ____};\n")
    assert "MolDefault_Byte3[3]" in text


def test_default_value_empty(decls):
    text = default_value(decls["BytesOpt"])
    assert text.endswith("{};\n")
    assert "MolDefault_BytesOpt[0]" in text


def test_default_value_long(decls):
    table = decls["Table1"]
    text = default_value(table)
    lines = text.splitlines()
    head = lines[0]
    assert head.endswith(" =  {")
    assert "MolDefault_Table1[9]" in head
    assert lines[1] == "    0x09, ____, ____, ____, 0x08, ____, ____, ____, ____,"
    assert lines[-1] == "};"