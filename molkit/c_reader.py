"""Reader macros and verification functions for generated C code."""

from __future__ import annotations

from collections.abc import Iterable
from itertools import accumulate

from . import schema
from .c_names import (
    API_DECORATOR,
    define_reader_function,
    define_reader_macro,
    reader_prefix,
)
from .schema import TopDecl, is_atom

_VERIFY_ARGS = "(const mol_seg_t*, bool)"
_VERIFY_RET = "mol_errno"


def _lines(lines: Iterable[str]) -> str:
    return "".join(line.rstrip() + "\n" for line in lines)


def _verify_prototype(decl: TopDecl) -> str:
    return define_reader_function(decl, "_verify", _VERIFY_ARGS, _VERIFY_RET)


def _verify_signature(decl: TopDecl) -> str:
    func_name = f"{reader_prefix(decl)}_verify"
    return (
        f"{API_DECORATOR} mol_errno {func_name} "
        "(const mol_seg_t *input, bool compatible) {"
    )


def _verify_name(decl: TopDecl) -> str:
    return f"{reader_prefix(decl)}_verify"


def _option_interfaces(decl: schema.Option) -> str:
    return _verify_prototype(decl) + define_reader_macro(
        decl, "_is_none(s)", "mol_option_is_none(s)"
    )


def _union_interfaces(decl: schema.Union) -> str:
    return _verify_prototype(decl) + define_reader_macro(
        decl, "_unpack(s)", "mol_union_unpack(s)"
    )


def _array_interfaces(decl: schema.Array) -> str:
    parts = [
        define_reader_macro(
            decl, "_verify(s, c)", f"mol_verify_fixed_size(s, {decl.total_size()})"
        )
    ]
    for i in range(decl.item_count):
        offset = decl.item_size * i
        parts.append(
            define_reader_macro(
                decl,
                f"_get_nth{i}(s)",
                f"mol_slice_by_offset(s, {offset}, {decl.item_size})",
            )
        )
    return "".join(parts)


def _struct_interfaces(decl: schema.Struct) -> str:
    parts = [
        define_reader_macro(
            decl, "_verify(s, c)", f"mol_verify_fixed_size(s, {decl.total_size()})"
        )
    ]
    offsets = accumulate(decl.field_size, initial=0)
    for f, offset, size in zip(decl.inner, offsets, decl.field_size):
        parts.append(
            define_reader_macro(
                decl, f"_get_{f.name}(s)", f"mol_slice_by_offset(s, {offset}, {size})"
            )
        )
    return "".join(parts)


def _fixvec_interfaces(decl: schema.FixVec) -> str:
    parts = [
        define_reader_macro(
            decl, "_verify(s, c)", f"mol_fixvec_verify(s, {decl.item_size})"
        ),
        define_reader_macro(decl, "_length(s)", "mol_fixvec_length(s)"),
        define_reader_macro(
            decl, "_get(s, i)", f"mol_fixvec_slice_by_index(s, {decl.item_size}, i)"
        ),
    ]
    if is_atom(decl.typ):
        parts.append(
            define_reader_macro(decl, "_raw_bytes(s)", "mol_fixvec_slice_raw_bytes(s)")
        )
    return "".join(parts)


def _dynvec_interfaces(decl: schema.DynVec) -> str:
    return (
        _verify_prototype(decl)
        + define_reader_macro(decl, "_length(s)", "mol_dynvec_length(s)")
        + define_reader_macro(decl, "_get(s, i)", "mol_dynvec_slice_by_index(s, i)")
    )


def _table_interfaces(decl: schema.Table) -> str:
    parts = [
        _verify_prototype(decl),
        define_reader_macro(
            decl, "_actual_field_count(s)", "mol_table_actual_field_count(s)"
        ),
        define_reader_macro(
            decl,
            "_has_extra_fields(s)",
            f"mol_table_has_extra_fields(s, {len(decl.inner)})",
        ),
    ]
    for i, f in enumerate(decl.inner):
        parts.append(
            define_reader_macro(
                decl, f"_get_{f.name}(s)", f"mol_table_slice_by_index(s, {i})"
            )
        )
    return "".join(parts)


def _option_verify(decl: schema.Option) -> str:
    lines = [_verify_signature(decl)]
    if is_atom(decl.typ):
        lines += [
            "    if (input->size > 1) {",
            "        return MOL_ERR;",
        ]
    else:
        lines += [
            "    if (input->size != 0) {",
            f"        return {_verify_name(decl.typ)}(input, compatible);",
        ]
    lines += [
        "    } else {",
        "        return MOL_OK;",
        "    }",
        "}",
    ]
    return _lines(lines)


def _union_verify(decl: schema.Union) -> str:
    lines = [
        _verify_signature(decl),
        "    if (input->size < MOL_NUM_T_SIZE) {",
        "        return MOL_ERR_HEADER;",
        "    }",
        "    mol_num_t item_id = mol_unpack_number(input->ptr);",
        "    mol_seg_t inner;",
        "    inner.ptr = input->ptr + MOL_NUM_T_SIZE;",
        "    inner.size = input->size - MOL_NUM_T_SIZE;",
        "    switch(item_id) {",
    ]
    for item_id, item in enumerate(decl.inner):
        lines.append(f"        case {item_id}:")
        if is_atom(item.typ):
            lines.append("            return inner.size == 1 ? MOL_OK : MOL_ERR;")
        else:
            lines.append(f"            return {_verify_name(item.typ)}(&inner, compatible);")
    lines += [
        "        default:",
        "            return MOL_ERR_UNKNOWN_ITEM;",
        "    }",
        "}",
    ]
    return _lines(lines)


def _size_header_lines() -> list[str]:
    return [
        "    if (input->size < MOL_NUM_T_SIZE) {",
        "        return MOL_ERR_HEADER;",
        "    }",
        "    uint8_t *ptr = input->ptr;",
        "    mol_num_t total_size = mol_unpack_number(ptr);",
        "    if (input->size != total_size) {",
        "        return MOL_ERR_TOTAL_SIZE;",
        "    }",
    ]


_EMPTY_OK_LINES = [
    "    if (input->size == MOL_NUM_T_SIZE) {",
    "        return MOL_OK;",
    "    }",
]

_FIRST_OFFSET_LINES = [
    "    if (input->size < MOL_NUM_T_SIZE * 2) {",
    "        return MOL_ERR_HEADER;",
    "    }",
    "    ptr += MOL_NUM_T_SIZE;",
    "    mol_num_t offset = mol_unpack_number(ptr);",
    "    if (offset % 4 > 0 || offset < MOL_NUM_T_SIZE*2) {",
    "        return MOL_ERR_OFFSET;",
    "    }",
]


def _dynvec_verify(decl: schema.DynVec) -> str:
    f = _verify_name(decl.typ)
    lines = [_verify_signature(decl), *_size_header_lines(), *_EMPTY_OK_LINES]
    lines += _FIRST_OFFSET_LINES
    lines += [
        "    mol_num_t item_count = offset / 4 - 1;",
        "    if (input->size < MOL_NUM_T_SIZE*(item_count+1)) {",
        "        return MOL_ERR_HEADER;",
        "    }",
        "    mol_num_t end;",
        "    for (mol_num_t i=1; i<item_count; i++) {",
        "        ptr += MOL_NUM_T_SIZE;",
        "        end = mol_unpack_number(ptr);",
        "        if (offset > end) {",
        "            return MOL_ERR_OFFSET;",
        "        }",
        "        mol_seg_t inner;",
        "        inner.ptr = input->ptr + offset;",
        "        inner.size = end - offset;",
        f"        mol_errno errno = {f}(&inner, compatible);",
        "        if (errno != MOL_OK) {",
        "            return MOL_ERR_DATA;",
        "        }",
        "        offset = end;",
        "    }",
        "    if (offset > total_size) {",
        "        return MOL_ERR_OFFSET;",
        "    }",
        "    mol_seg_t inner;",
        "    inner.ptr = input->ptr + offset;",
        "    inner.size = total_size - offset;",
        f"    return {f}(&inner, compatible);",
        "}",
    ]
    return _lines(lines)


def _table_verify(decl: schema.Table) -> str:
    fc = len(decl.inner)
    lines = [_verify_signature(decl), *_size_header_lines()]
    if not decl.inner:
        lines += _EMPTY_OK_LINES
    lines += _FIRST_OFFSET_LINES
    lines += [
        "    mol_num_t field_count = offset / 4 - 1;",
        f"    if (field_count < {fc}) {{",
        "        return MOL_ERR_FIELD_COUNT;",
        f"    }} else if (!compatible && field_count > {fc}) {{",
        "        return MOL_ERR_FIELD_COUNT;",
        "    }",
        "    if (input->size < MOL_NUM_T_SIZE*(field_count+1)){",
        "        return MOL_ERR_HEADER;",
        "    }",
        "    mol_num_t offsets[field_count+1];",
        "    offsets[0] = offset;",
        "    for (mol_num_t i=1; i<field_count; i++) {",
        "        ptr += MOL_NUM_T_SIZE;",
        "        offsets[i] = mol_unpack_number(ptr);",
        "        if (offsets[i-1] > offsets[i]) {",
        "            return MOL_ERR_OFFSET;",
        "        }",
        "    }",
        "    if (offsets[field_count-1] > total_size) {",
        "        return MOL_ERR_OFFSET;",
        "    }",
    ]
    if decl.inner:
        lines.append("    offsets[field_count] = total_size;")
        if any(not is_atom(f.typ) for f in decl.inner):
            lines += [
                "        mol_seg_t inner;",
                "        mol_errno errno;",
            ]
        for i, f in enumerate(decl.inner):
            j = i + 1
            if is_atom(f.typ):
                lines += [
                    f"        if (offsets[{j}] - offsets[{i}] != 1) {{",
                    "            return MOL_ERR_DATA;",
                    "        }",
                ]
            else:
                lines += [
                    f"        inner.ptr = input->ptr + offsets[{i}];",
                    f"        inner.size = offsets[{j}] - offsets[{i}];",
                    f"        errno = {_verify_name(f.typ)}(&inner, compatible);",
                    "        if (errno != MOL_OK) {",
                    "            return MOL_ERR_DATA;",
                    "        }",
                ]
    lines += [
        "    return MOL_OK;",
        "}",
    ]
    return _lines(lines)


def reader_interfaces(decl: TopDecl) -> str:
    """Prototypes and macros of the reader API of ``decl``."""
    match decl:
        case schema.Option():
            return _option_interfaces(decl)
        case schema.Union():
            return _union_interfaces(decl)
        case schema.Array():
            return _array_interfaces(decl)
        case schema.Struct():
            return _struct_interfaces(decl)
        case schema.FixVec():
            return _fixvec_interfaces(decl)
        case schema.DynVec():
            return _dynvec_interfaces(decl)
        case schema.Table():
            return _table_interfaces(decl)
    raise TypeError(f"no reader API for {decl!r}")


def reader_functions(decl: TopDecl) -> str:
    """Function bodies of the reader API of ``decl``; empty when all are macros."""
    match decl:
        case schema.Option():
            return _option_verify(decl)
        case schema.Union():
            return _union_verify(decl)
        case schema.Array() | schema.Struct() | schema.FixVec():
            return ""
        case schema.DynVec():
            return _dynvec_verify(decl)
        case schema.Table():
            return _table_verify(decl)
    raise TypeError(f"no reader API for {decl!r}")