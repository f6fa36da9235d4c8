# molkit

molkit works with schemas for the Molecule binary serialization format. It provides:

- `molkit.numbers`: the 4-byte little-endian numbers that the format uses for headers, sizes and offsets;
- `molkit.errors` and `molkit.primitive`: verification errors and the single-byte `Byte` / `ByteReader` types;
- `molkit.raw_ast` and `molkit.schema`: a schema model that resolves raw declarations into typed ones and computes the default encoding of each type;
- `molkit.c_names`, `molkit.c_reader`, `molkit.c_builder` and `molkit.c_generator`: generation of a C header with reader and builder APIs for a schema.

## Installation

```
pip install molkit
```

To run the tests, install the `test` extra and run pytest:

```
pip install "molkit[test]"
pytest
```

## Numbers

Every number in the format is an unsigned 32-bit little-endian integer.

```python
from molkit.numbers import pack_number, unpack_number, unpack_number_vec, hex_string

pack_number(9)                        # b"\x09\x00\x00\x00"
unpack_number(b"\x09\x00\x00\x00")    # 9
unpack_number_vec(bytes(8))           # [b"\x00\x00\x00\x00", b"\x00\x00\x00\x00"]
hex_string(b"\x12\x34")               # "1234"
```

`pack_number` raises `ValueError` for values outside 0..0xFFFFFFFF. `unpack_number` raises `ValueError` for input shorter than four bytes. `unpack_number_vec` raises `ValueError` when the length is not a multiple of four.

## Verification errors and bytes

Every error in `molkit.errors` derives from `VerificationError`, which is a `ValueError` subclass with a `name` attribute. The subclasses are `TotalSizeNotMatch`, `HeaderIsBroken`, `UnknownItem`, `OffsetsNotMatch` and `FieldCountNotMatch`.

```python
from molkit.primitive import Byte, ByteReader

b = Byte.from_slice(b"\x12")      # Byte(0x12)
b.as_slice()                      # b"\x12"
b.as_reader().to_entity() == b    # True
ByteReader.verify(b"\x00\x01", False)   # raises TotalSizeNotMatch
```

## Schemas and default values

Build a `RawAst` from declarations (`OptionDecl`, `UnionDecl`, `ArrayDecl`, `StructDecl`, `VectorDecl`, `TableDecl`, plus `ImportStmt`), then resolve it with `Ast.from_raw`. The built-in byte type is named `byte`.

```python
from molkit.raw_ast import RawAst, ArrayDecl, VectorDecl, TableDecl, FieldDecl
from molkit.schema import Ast

raw = RawAst(namespace="example")
raw.add_decl(ArrayDecl(name="Word", typ="byte", length=2))
raw.add_decl(VectorDecl(name="Bytes", typ="byte"))
raw.add_decl(TableDecl(name="Pair", inner=[
    FieldDecl(name="a", typ="byte"),
    FieldDecl(name="b", typ="Bytes"),
]))

ast = Ast.from_raw(raw)
for decl in ast.major_decls():
    print(decl.name, decl.type_name, decl.default_content().hex())
```

A vector of a fixed-size type resolves to `FixVec` and a vector of any other type resolves to `DynVec`. `fixed_size(decl)` returns the encoded size of arrays, structs and the byte atom, and `None` for every other type. `major_decls()` and `major_imports()` leave out entries whose `imported_depth` is not zero.

`Ast.from_raw` raises `molkit.schema.SchemaError` for:

- the reserved names `byte` and `Byte`;
- a name used more than once;
- types that cannot be resolved;
- an empty union;
- an array or struct whose element or field has no fixed size;
- an array whose item size is zero, or a struct whose total size is zero.

## Generating a C header

```python
from molkit.c_generator import generate, encode_version

header = generate(ast, version="0.1.0", api_version_min="0.1.0")
with open("example.h", "w") as fh:
    fh.write(header)

encode_version("1.2.3")   # 1002003
```

The header includes `molecule_reader.h` and `molecule_builder.h`. It defines `MolReader_*` and `MolBuilder_*` macros and functions and `MolDefault_*` constants for every declaration that is not imported, and it writes an `#include` line for each direct import. The individual parts can also be produced on their own: `reader_interfaces` and `reader_functions` in `molkit.c_reader`, and `builder_interfaces`, `builder_functions`, `default_value` and `calculate_capacity` in `molkit.c_builder`.

## What molkit does not do

- It does not parse schema text. Build the `RawAst` in Python.
- It has no command-line tool. Call `generate` and write the result yourself.
- Apart from `Byte`, it has no Python reader or builder types for encoding or decoding data.
- The only code it generates is a C header.