"""Identifier prefixes, declaration lines and includes for generated C code."""

from __future__ import annotations

from .raw_ast import ImportStmt
from .schema import TopDecl

API_DECORATOR = "MOLECULE_API_DECORATOR"
"""Macro placed before every exported function and constant."""


def reader_prefix(decl: TopDecl) -> str:
    """Prefix of the reader macros and functions of ``decl``."""
    return f"MolReader_{decl.name}"


def builder_prefix(decl: TopDecl) -> str:
    """Prefix of the builder macros and functions of ``decl``."""
    return f"MolBuilder_{decl.name}"


def default_constant(decl: TopDecl) -> str:
    """Name of the constant holding the default encoding of ``decl``."""
    return f"MolDefault_{decl.name}"


def _define_macro(prefix: str, sig_tail: str, content: str) -> str:
    signature = prefix + sig_tail
    return f"{'#define':<39} {signature:<47} {content}\n"


def _define_function(prefix: str, sig_tail: str, args: str, ret: str) -> str:
    name = prefix + sig_tail
    return f"{API_DECORATOR:<23} {ret:<15} {name:<47} {args};\n"


def define_reader_macro(decl: TopDecl, sig_tail: str, content: str) -> str:
    """A ``#define`` line for a reader macro of ``decl``."""
    return _define_macro(reader_prefix(decl), sig_tail, content)


def define_builder_macro(decl: TopDecl, sig_tail: str, content: str) -> str:
    """A ``#define`` line for a builder macro of ``decl``."""
    return _define_macro(builder_prefix(decl), sig_tail, content)


def define_reader_function(decl: TopDecl, sig_tail: str, args: str, ret: str) -> str:
    """A prototype line for a reader function of ``decl``."""
    return _define_function(reader_prefix(decl), sig_tail, args, ret)


def define_builder_function(decl: TopDecl, sig_tail: str, args: str, ret: str) -> str:
    """A prototype line for a builder function of ``decl``."""
    return _define_function(builder_prefix(decl), sig_tail, args, ret)


def gen_import(stmt: ImportStmt) -> str:
    """The ``#include`` line for an imported schema."""
    parents = "../" * stmt.depth
    directories = "".join(f"{part}/" for part in stmt.path)
    return f'#include "{parents}{directories}{stmt.name}.h"\n'