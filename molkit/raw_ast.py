"""Schema declarations as parsed, before their types are resolved."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union


@dataclass
class ItemDecl:
    """One alternative of a union, by type name."""

    typ: str


@dataclass
class FieldDecl:
    """A named field of a struct or table, by type name."""

    name: str
    typ: str


@dataclass
class OptionDecl:
    name: str
    typ: str
    imported_depth: int = 0


@dataclass
class UnionDecl:
    name: str
    inner: list[ItemDecl] = field(default_factory=list)
    imported_depth: int = 0


@dataclass
class ArrayDecl:
    name: str
    typ: str
    length: int
    imported_depth: int = 0


@dataclass
class StructDecl:
    name: str
    inner: list[FieldDecl] = field(default_factory=list)
    imported_depth: int = 0


@dataclass
class VectorDecl:
    name: str
    typ: str
    imported_depth: int = 0


@dataclass
class TableDecl:
    name: str
    inner: list[FieldDecl] = field(default_factory=list)
    imported_depth: int = 0


TopDecl = Union[OptionDecl, UnionDecl, ArrayDecl, StructDecl, VectorDecl, TableDecl]

_TOP_DECL_TYPES = (OptionDecl, UnionDecl, ArrayDecl, StructDecl, VectorDecl, TableDecl)


@dataclass
class ImportStmt:
    """An import of another schema file."""

    name: str
    path: list[str] = field(default_factory=list)
    depth: int = 0
    imported_base: Path = field(default_factory=Path)
    imported_depth: int = 0


@dataclass
class RawAst:
    """A parsed schema: its namespace, imports and declarations in order."""

    namespace: str = ""
    imports: list[ImportStmt] = field(default_factory=list)
    decls: list[TopDecl] = field(default_factory=list)

    def add_import(self, stmt: ImportStmt) -> None:
        if not isinstance(stmt, ImportStmt):
            raise TypeError(f"not an import statement: {stmt!r}")
        self.imports.append(stmt)

    def add_decl(self, decl: TopDecl) -> None:
        if not isinstance(decl, _TOP_DECL_TYPES):
            raise TypeError(f"not a top-level declaration: {decl!r}")
        self.decls.append(decl)

    def names(self) -> list[str]:
        """Names of the declarations, in declaration order."""
        return [decl.name for decl in self.decls]