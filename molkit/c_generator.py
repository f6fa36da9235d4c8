"""Generation of a complete C header from a resolved schema."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .c_builder import builder_functions, builder_interfaces, default_value
from .c_names import API_DECORATOR, gen_import
from .c_reader import reader_functions, reader_interfaces
from .schema import Ast

_SEMVER = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


def encode_version(text: str) -> int:
    """Encode a semantic version as ``(major * 1000 + minor) * 1000 + patch``."""
    match = _SEMVER.match(text)
    if match is None:
        raise ValueError(f"invalid semantic version: {text!r}")
    major, minor, patch = (int(part) for part in match.groups())
    return (major * 1000 + minor) * 1000 + patch


def _to_snake(name: str) -> str:
    return "".join(
        f"_{ch.lower()}" if index > 0 and ch.isupper() else ch.lower()
        for index, ch in enumerate(name)
    )


def _lines(lines: Iterable[str]) -> str:
    return "".join(line.rstrip() + "\n" for line in lines)


def _title(title: str) -> str:
    return f"/*\n * {title}\n */\n\n"


def _ifndef(name: str) -> str:
    n = _to_snake(name).upper()
    return _lines(
        [
            f"#ifndef {n}_H",
            f"#define {n}_H",
            "",
            "#ifdef __cplusplus",
            '#define _CPP_BEGIN extern "C" {',
            "#define _CPP_END }",
            "_CPP_BEGIN",
            "#endif /* __cplusplus */",
            "",
            f"#ifndef {API_DECORATOR}",
            "#define __DEFINE_MOLECULE_API_DECORATOR",
            f"#define {API_DECORATOR}",
            f"#endif /* {API_DECORATOR} */",
        ]
    )


def _endif(name: str) -> str:
    n = _to_snake(name).upper()
    return _lines(
        [
            "",
            "#ifdef __DEFINE_MOLECULE_API_DECORATOR",
            f"#undef {API_DECORATOR}",
            "#undef __DEFINE_MOLECULE_API_DECORATOR",
            "#endif /* __DEFINE_MOLECULE_API_DECORATOR */",
            "",
            "#ifdef __cplusplus",
            "_CPP_END",
            "#undef _CPP_BEGIN",
            "#undef _CPP_END",
            "#endif /* __cplusplus */",
            "",
            f"#endif /* {n}_H */",
        ]
    )


def _define_version(version: str, api_version_min: str) -> str:
    return (
        f"#define MOLECULEC_VERSION {encode_version(version)}\n"
        f"#define MOLECULE_API_VERSION_MIN {encode_version(api_version_min)}\n"
    )


def generate(ast: Ast, version: str, api_version_min: str) -> str:
    """Return the C header for the declarations made in ``ast`` itself."""
    decls = ast.major_decls()
    parts = [
        f"// Generated by Molecule {version}\n",
        "\n",
        _define_version(version, api_version_min),
        "\n",
        '#include "molecule_reader.h"\n',
        '#include "molecule_builder.h"\n',
        "\n",
        _ifndef(ast.namespace),
    ]
    imports = ast.major_imports()
    if imports:
        parts.append("\n")
        parts.extend(gen_import(stmt) for stmt in imports)
    parts += ["\n", _title("Reader APIs")]
    parts.extend(reader_interfaces(decl) for decl in decls)
    parts += ["\n", _title("Builder APIs")]
    parts.extend(builder_interfaces(decl) for decl in decls)
    parts += ["\n", _title("Default Value"), "#define ____ 0x00\n", "\n"]
    parts.extend(default_value(decl) for decl in decls)
    parts += ["\n", "#undef ____\n", "\n", _title("Reader Functions")]
    parts.extend(reader_functions(decl) for decl in decls)
    parts += ["\n", _title("Builder Functions")]
    parts.extend(builder_functions(decl) for decl in decls)
    parts.append(_endif(ast.namespace))
    return "".join(parts)