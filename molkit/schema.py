"""Resolved schema declarations: types, sizes and default encodings."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import accumulate
from typing import ClassVar

from . import raw_ast
from .numbers import NUMBER_SIZE, pack_number

ATOM_NAME = "byte"
ATOM_SIZE = 1
ATOM_PRIMITIVE_NAME = "Byte"


class SchemaError(ValueError):
    """The schema cannot be resolved into a consistent set of types."""


class _Decl:
    TYPE_NAME: ClassVar[str] = "TopDecl"
    name: str

    @property
    def type_name(self) -> str:
        return self.TYPE_NAME


@dataclass(eq=False)
class Atom(_Decl):
    """The built-in single-byte type."""

    TYPE_NAME: ClassVar[str] = "Atom"

    name: str = ATOM_NAME
    size: int = ATOM_SIZE

    def default_content(self) -> bytes:
        return b"\x00"


@dataclass(eq=False)
class SchemaItem:
    """One alternative of a union."""

    typ: TopDecl


@dataclass(eq=False)
class SchemaField:
    """A named field of a struct or table."""

    name: str
    typ: TopDecl


@dataclass(eq=False)
class Option(_Decl):
    TYPE_NAME: ClassVar[str] = "Option"

    name: str
    typ: TopDecl
    imported_depth: int = 0

    def default_content(self) -> bytes:
        return b""


@dataclass(eq=False)
class Union(_Decl):
    TYPE_NAME: ClassVar[str] = "Union"

    name: str
    inner: list[SchemaItem] = field(default_factory=list)
    imported_depth: int = 0

    def default_content(self) -> bytes:
        item_id = 0
        return pack_number(item_id) + self.inner[item_id].typ.default_content()


@dataclass(eq=False)
class Array(_Decl):
    TYPE_NAME: ClassVar[str] = "Array"

    name: str
    item_size: int
    item_count: int
    typ: TopDecl
    imported_depth: int = 0

    def total_size(self) -> int:
        return self.item_size * self.item_count

    def default_content(self) -> bytes:
        return bytes(self.total_size())


@dataclass(eq=False)
class Struct(_Decl):
    TYPE_NAME: ClassVar[str] = "Struct"

    name: str
    field_size: list[int] = field(default_factory=list)
    inner: list[SchemaField] = field(default_factory=list)
    imported_depth: int = 0

    def total_size(self) -> int:
        return sum(self.field_size)

    def default_content(self) -> bytes:
        return bytes(self.total_size())


@dataclass(eq=False)
class FixVec(_Decl):
    TYPE_NAME: ClassVar[str] = "FixVec"

    name: str
    item_size: int
    typ: TopDecl
    imported_depth: int = 0

    def default_content(self) -> bytes:
        return pack_number(0)


@dataclass(eq=False)
class DynVec(_Decl):
    TYPE_NAME: ClassVar[str] = "DynVec"

    name: str
    typ: TopDecl
    imported_depth: int = 0

    def default_content(self) -> bytes:
        return pack_number(NUMBER_SIZE)


@dataclass(eq=False)
class Table(_Decl):
    TYPE_NAME: ClassVar[str] = "Table"

    name: str
    inner: list[SchemaField] = field(default_factory=list)
    imported_depth: int = 0

    def default_content(self) -> bytes:
        if not self.inner:
            return pack_number(NUMBER_SIZE)
        field_data = [f.typ.default_content() for f in self.inner]
        header_size = NUMBER_SIZE * (len(self.inner) + 1)
        offsets = list(
            accumulate((len(data) for data in field_data[:-1]), initial=header_size)
        )
        total_size = header_size + sum(len(data) for data in field_data)
        content = (
            pack_number(total_size)
            + b"".join(pack_number(offset) for offset in offsets)
            + b"".join(field_data)
        )
        assert len(content) == total_size
        return content


TopDecl = Atom | Option | Union | Array | Struct | FixVec | DynVec | Table


def is_atom(decl: TopDecl) -> bool:
    """Whether ``decl`` is the built-in byte type."""
    return isinstance(decl, Atom)


def fixed_size(decl: TopDecl) -> int | None:
    """The encoded size of ``decl`` if it is fixed, otherwise ``None``."""
    if isinstance(decl, Atom):
        return decl.size
    if isinstance(decl, (Array, Struct)):
        return decl.total_size()
    return None


def _complete_union(raw: raw_ast.UnionDecl, deps: dict[str, TopDecl]) -> Union | None:
    if not raw.inner:
        raise SchemaError(f"the union ({raw.name}) is empty")
    items = []
    for raw_item in raw.inner:
        dep = deps.get(raw_item.typ)
        if dep is None:
            return None
        items.append(SchemaItem(dep))
    return Union(raw.name, items, raw.imported_depth)


def _complete_array(raw: raw_ast.ArrayDecl, deps: dict[str, TopDecl]) -> Array | None:
    dep = deps.get(raw.typ)
    if dep is None:
        return None
    item_size = fixed_size(dep)
    if item_size is None:
        raise SchemaError(
            f"the inner type ({raw.typ}) of array ({raw.name}) doesn't have fixed size"
        )
    if item_size == 0:
        raise SchemaError(f"the array ({raw.name}) has no size")
    return Array(raw.name, item_size, raw.length, dep, raw.imported_depth)


def _complete_struct(raw: raw_ast.StructDecl, deps: dict[str, TopDecl]) -> Struct | None:
    fields = []
    sizes = []
    for raw_field in raw.inner:
        dep = deps.get(raw_field.typ)
        if dep is None:
            return None
        size = fixed_size(dep)
        if size is None:
            raise SchemaError(
                f"the inner type ({raw_field.name}) in struct ({raw.name}) "
                "doesn't have fixed size"
            )
        sizes.append(size)
        fields.append(SchemaField(raw_field.name, dep))
    if sum(sizes) == 0:
        raise SchemaError(f"the struct ({raw.name}) has no size")
    return Struct(raw.name, sizes, fields, raw.imported_depth)


def _complete_vector(
    raw: raw_ast.VectorDecl, deps: dict[str, TopDecl]
) -> FixVec | DynVec | None:
    dep = deps.get(raw.typ)
    if dep is None:
        return None
    item_size = fixed_size(dep)
    if item_size is None:
        return DynVec(raw.name, dep, raw.imported_depth)
    return FixVec(raw.name, item_size, dep, raw.imported_depth)


def _complete_table(raw: raw_ast.TableDecl, deps: dict[str, TopDecl]) -> Table | None:
    fields = []
    for raw_field in raw.inner:
        dep = deps.get(raw_field.typ)
        if dep is None:
            return None
        fields.append(SchemaField(raw_field.name, dep))
    return Table(raw.name, fields, raw.imported_depth)


def _complete(raw: raw_ast.TopDecl, deps: dict[str, TopDecl]) -> TopDecl | None:
    match raw:
        case raw_ast.OptionDecl():
            dep = deps.get(raw.typ)
            return None if dep is None else Option(raw.name, dep, raw.imported_depth)
        case raw_ast.UnionDecl():
            return _complete_union(raw, deps)
        case raw_ast.ArrayDecl():
            return _complete_array(raw, deps)
        case raw_ast.StructDecl():
            return _complete_struct(raw, deps)
        case raw_ast.VectorDecl():
            return _complete_vector(raw, deps)
        case raw_ast.TableDecl():
            return _complete_table(raw, deps)
    raise TypeError(f"not a top-level declaration: {raw!r}")


@dataclass
class Ast:
    """A schema whose type references have all been resolved."""

    namespace: str
    imports: list[raw_ast.ImportStmt] = field(default_factory=list)
    decls: list[TopDecl] = field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: raw_ast.RawAst) -> Ast:
        """Resolve every declaration of ``raw``; raise ``SchemaError`` on failure."""
        index: dict[str, raw_ast.TopDecl] = {}
        for decl in raw.decls:
            name = decl.name
            if name in (ATOM_NAME, ATOM_PRIMITIVE_NAME):
                raise SchemaError(f"the name `{name}` is reserved")
            if name in index:
                raise SchemaError(f"the name `{name}` is used more than once")
            index[name] = decl

        resolved: dict[str, TopDecl] = {ATOM_NAME: Atom()}
        pending = list(index)
        while pending:
            remaining = []
            for name in pending:
                decl = _complete(index[name], resolved)
                if decl is None:
                    remaining.append(name)
                else:
                    resolved[name] = decl
            if len(remaining) == len(pending):
                raise SchemaError(
                    f"there are {len(pending)} types which are unable to be "
                    f"completed: {pending}"
                )
            pending = remaining

        return cls(
            namespace=raw.namespace,
            imports=list(raw.imports),
            decls=[resolved[decl.name] for decl in raw.decls],
        )

    def major_decls(self) -> list[TopDecl]:
        """Declarations made in this schema itself, not in imported ones."""
        return [decl for decl in self.decls if decl.imported_depth == 0]

    def major_imports(self) -> list[raw_ast.ImportStmt]:
        """Imports made by this schema itself, not by imported ones."""
        return [stmt for stmt in self.imports if stmt.imported_depth == 0]