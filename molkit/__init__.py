"""Molecule format tools: little-endian numbers, byte primitives, schema resolution and C header generation."""

__version__ = "0.1.0"

__all__ = [
    "numbers",
    "errors",
    "primitive",
    "raw_ast",
    "schema",
    "c_names",
    "c_reader",
    "c_builder",
    "c_generator",
]