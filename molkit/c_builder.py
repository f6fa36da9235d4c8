"""Builder macros, build functions and default constants for generated C code."""

from __future__ import annotations

from collections.abc import Iterable
from itertools import accumulate

from . import schema
from .c_names import (
    API_DECORATOR,
    builder_prefix,
    default_constant,
    define_builder_function,
    define_builder_macro,
)
from .numbers import NUMBER_SIZE
from .schema import TopDecl, is_atom

_DEFAULT_BYTES_PER_LINE = 12


def _lines(lines: Iterable[str]) -> str:
    return "".join(line.rstrip() + "\n" for line in lines)


def calculate_capacity(used: int) -> int:
    """The smallest power of two that is at least ``used`` (and at least 1)."""
    if used < 0:
        raise ValueError(f"capacity cannot be negative: {used}")
    return 1 if used <= 1 else 1 << (used - 1).bit_length()


def _build_interface(decl: TopDecl, func_name: str | None) -> str:
    if func_name is None:
        return define_builder_function(decl, "_build", "(mol_builder_t)", "mol_seg_res_t")
    return define_builder_macro(decl, "_build(b)", f"{func_name}(b)")


def _option_interfaces(decl: schema.Option) -> str:
    return (
        define_builder_macro(decl, "_init(b)", "mol_builder_initialize_fixed_size(b, 0)")
        + define_builder_macro(decl, "_set(b, p, l)", "mol_option_builder_set(b, p, l)")
        + _build_interface(decl, "mol_builder_finalize_simple")
    )


def _union_interfaces(decl: schema.Union) -> str:
    item_id = 0
    default = decl.inner[item_id].typ
    if is_atom(default):
        length, name = 1, "NULL"
    else:
        length, name = len(default.default_content()), f"&{default_constant(default)}"
    capacity = calculate_capacity(NUMBER_SIZE + length)
    parts = [
        define_builder_macro(
            decl,
            "_init(b)",
            f"mol_union_builder_initialize(b, {capacity}, {item_id}, {name}, {length})",
        )
    ]
    for index, item in enumerate(decl.inner):
        if is_atom(item.typ):
            parts.append(
                define_builder_macro(
                    decl,
                    f"_set_{item.typ.name}(b, p)",
                    f"mol_union_builder_set_byte(b, {index}, p)",
                )
            )
        else:
            parts.append(
                define_builder_macro(
                    decl,
                    f"_set_{item.typ.name}(b, p, l)",
                    f"mol_union_builder_set(b, {index}, p, l)",
                )
            )
    parts.append(_build_interface(decl, "mol_builder_finalize_simple"))
    return "".join(parts)


def _set_by_offset(atom: bool, offset: int, size: int) -> str:
    if atom:
        return f"mol_builder_set_byte_by_offset(b, {offset}, p)"
    return f"mol_builder_set_by_offset(b, {offset}, p, {size})"


def _array_interfaces(decl: schema.Array) -> str:
    parts = [
        define_builder_macro(
            decl, "_init(b)", f"mol_builder_initialize_fixed_size(b, {decl.total_size()})"
        )
    ]
    atom = is_atom(decl.typ)
    for i in range(decl.item_count):
        parts.append(
            define_builder_macro(
                decl,
                f"_set_nth{i}(b, p)",
                _set_by_offset(atom, decl.item_size * i, decl.item_size),
            )
        )
    parts.append(_build_interface(decl, "mol_builder_finalize_simple"))
    return "".join(parts)


def _struct_interfaces(decl: schema.Struct) -> str:
    parts = [
        define_builder_macro(
            decl, "_init(b)", f"mol_builder_initialize_fixed_size(b, {decl.total_size()})"
        )
    ]
    offsets = accumulate(decl.field_size, initial=0)
    for f, offset, size in zip(decl.inner, offsets, decl.field_size):
        parts.append(
            define_builder_macro(
                decl, f"_set_{f.name}(b, p)", _set_by_offset(is_atom(f.typ), offset, size)
            )
        )
    parts.append(_build_interface(decl, "mol_builder_finalize_simple"))
    return "".join(parts)


def _fixvec_interfaces(decl: schema.FixVec) -> str:
    capacity = calculate_capacity(decl.item_size * 16)
    if is_atom(decl.typ):
        push = "mol_fixvec_builder_push_byte(b, p)"
    else:
        push = f"mol_fixvec_builder_push(b, p, {decl.item_size})"
    return (
        define_builder_macro(decl, "_init(b)", f"mol_fixvec_builder_initialize(b, {capacity})")
        + define_builder_macro(decl, "_push(b, p)", push)
        + _build_interface(decl, "mol_fixvec_builder_finalize")
    )


def _dynvec_interfaces(decl: schema.DynVec) -> str:
    data_capacity = calculate_capacity(len(decl.typ.default_content()) * 16)
    number_capacity = calculate_capacity(NUMBER_SIZE * 16)
    return (
        define_builder_macro(
            decl,
            "_init(b)",
            f"mol_builder_initialize_with_capacity(b, {data_capacity}, {number_capacity})",
        )
        + define_builder_macro(decl, "_push(b, p, l)", "mol_dynvec_builder_push(b, p, l)")
        + _build_interface(decl, "mol_dynvec_builder_finalize")
    )


def _table_interfaces(decl: schema.Table) -> str:
    capacity = calculate_capacity(len(decl.default_content()) * 4)
    parts = [
        define_builder_macro(
            decl,
            "_init(b)",
            f"mol_table_builder_initialize(b, {capacity}, {len(decl.inner)})",
        )
    ]
    for i, f in enumerate(decl.inner):
        if is_atom(f.typ):
            parts.append(
                define_builder_macro(
                    decl, f"_set_{f.name}(b, p)", f"mol_table_builder_add_byte(b, {i}, p)"
                )
            )
        else:
            parts.append(
                define_builder_macro(
                    decl, f"_set_{f.name}(b, p, l)", f"mol_table_builder_add(b, {i}, p, l)"
                )
            )
    parts.append(_build_interface(decl, None))
    return "".join(parts)


def _table_build(decl: schema.Table) -> str:
    func_name = f"{builder_prefix(decl)}_build"
    offset = NUMBER_SIZE * (len(decl.inner) + 1)
    defaults = [len(f.typ.default_content()) for f in decl.inner]
    lines = [
        f"{API_DECORATOR} mol_seg_res_t {func_name} (mol_builder_t builder) {{",
        "    mol_seg_res_t res;",
        "    res.errno = MOL_OK;",
        f"    mol_num_t offset = {offset};",
    ]
    if decl.inner:
        lines.append("    mol_num_t len;")
    lines.append("    res.seg.size = offset;")
    for i, length in enumerate(defaults):
        lines += [
            f"    len = builder.number_ptr[{i * 2 + 1}];",
            f"    res.seg.size += len == 0 ? {length} : len;",
        ]
    lines += [
        "    res.seg.ptr = (uint8_t*)malloc(res.seg.size);",
        "    uint8_t *dst = res.seg.ptr;",
        "    mol_pack_number(dst, &res.seg.size);",
        "    dst += MOL_NUM_T_SIZE;",
    ]
    for i, length in enumerate(defaults):
        lines += [
            "    mol_pack_number(dst, &offset);",
            "    dst += MOL_NUM_T_SIZE;",
            f"    len = builder.number_ptr[{i * 2 + 1}];",
            f"    offset += len == 0 ? {length} : len;",
        ]
    if decl.inner:
        lines.append("    uint8_t *src = builder.data_ptr;")
    for i, (f, length) in enumerate(zip(decl.inner, defaults)):
        lines += [
            f"    len = builder.number_ptr[{i * 2 + 1}];",
            "    if (len == 0) {",
            f"        len = {length};",
        ]
        if is_atom(f.typ):
            lines.append("        *dst = 0;")
        else:
            lines.append(f"        memcpy(dst, &{default_constant(f.typ)}, len);")
        lines += [
            "    } else {",
            f"        mol_num_t of = builder.number_ptr[{i * 2}];",
            "        memcpy(dst, src+of, len);",
            "    }",
            "    dst += len;",
        ]
    lines += [
        "    mol_builder_discard(builder);",
        "    return res;",
        "}",
    ]
    return _lines(lines)


def builder_interfaces(decl: TopDecl) -> str:
    """Macros and prototypes of the builder API of ``decl``."""
    match decl:
        case schema.Option():
            body = _option_interfaces(decl)
        case schema.Union():
            body = _union_interfaces(decl)
        case schema.Array():
            body = _array_interfaces(decl)
        case schema.Struct():
            body = _struct_interfaces(decl)
        case schema.FixVec():
            body = _fixvec_interfaces(decl)
        case schema.DynVec():
            body = _dynvec_interfaces(decl)
        case schema.Table():
            body = _table_interfaces(decl)
        case _:
            raise TypeError(f"no builder API for {decl!r}")
    return body + define_builder_macro(decl, "_clear(b)", "mol_builder_discard(b)")


def builder_functions(decl: TopDecl) -> str:
    """Function bodies of the builder API of ``decl``; empty when all are macros."""
    match decl:
        case schema.Table():
            return _table_build(decl)
        case (
            schema.Option()
            | schema.Union()
            | schema.Array()
            | schema.Struct()
            | schema.FixVec()
            | schema.DynVec()
        ):
            return ""
    raise TypeError(f"no builder API for {decl!r}")


def _byte_literal(byte: int) -> str:
    return "____" if byte == 0 else f"0x{byte:02x}"


def default_value(decl: TopDecl) -> str:
    """The C constant holding the default encoding of ``decl``."""
    content = decl.default_content()
    constant_name = (
        f"{API_DECORATOR} const uint8_t {default_constant(decl)}[{len(content)}]"
    )
    head = f"{constant_name:<64} =  {{"
    if len(content) > 4:
        rows = [
            " ".join(
                f"{_byte_literal(byte)},"
                for byte in content[start:start + _DEFAULT_BYTES_PER_LINE]
            )
            for start in range(0, len(content), _DEFAULT_BYTES_PER_LINE)
        ]
        body = "".join(f"\n    {row}" for row in rows) + "\n"
    else:
        body = ", ".join(_byte_literal(byte) for byte in content)
    return f"{head}{body}}};\n"