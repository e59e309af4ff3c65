"""
Go-specific naming utilities.

Handles Go reserved words, builtins, package name rules and the
package-level identifiers a generated metrics file declares.
"""

from typing import List, Tuple

from ...core.naming import IdentifierScope


# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

# Go predeclared identifiers
GO_BUILTINS = {
    "any",
    "bool",
    "byte",
    "comparable",
    "complex64",
    "complex128",
    "error",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
    "true",
    "false",
    "iota",
    "nil",
    "append",
    "cap",
    "clear",
    "close",
    "complex",
    "copy",
    "delete",
    "imag",
    "len",
    "make",
    "max",
    "min",
    "new",
    "panic",
    "print",
    "println",
    "real",
    "recover",
}

# Functions every generated file declares besides the per-metric ones
REGISTER_FUNC = "Register"
MUST_REGISTER_FUNC = "MustRegister"
FILE_LEVEL_OWNER = "generated file"

LABELS_TYPE_SUFFIX = "Labels"


def labels_type_name(identifier: str) -> str:
    """Name of the label struct generated for a metric identifier."""
    return f"{identifier}{LABELS_TYPE_SUFFIX}"


def accessor_name(verb: str, identifier: str) -> str:
    """Name of the accessor function, e.g. ``IncHttpRequestsTotal``."""
    return f"{verb}{identifier}"


def create_package_scope() -> IdentifierScope:
    """Create a package scope pre-populated with the file-level functions."""
    scope = IdentifierScope("package scope")
    scope.claim(REGISTER_FUNC, FILE_LEVEL_OWNER)
    scope.claim(MUST_REGISTER_FUNC, FILE_LEVEL_OWNER)
    return scope


def validate_go_package_name(name: str) -> Tuple[List[str], List[str]]:
    """
    Validate Go package name according to Go naming rules.

    Returns:
        Tuple of (errors, style warnings); the name is usable if errors is empty
    """
    errors = []
    warnings = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors, warnings

    # Go identifiers here are restricted to ASCII
    if not name.isascii() or not name.isidentifier():
        errors.append(f"'{name}' is not a valid Go identifier")

    if name in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    if name == "_":
        errors.append("Package name cannot be the blank identifier")

    if errors:
        return errors, warnings

    if name != name.lower():
        warnings.append("Package names should be lowercase")

    if "_" in name:
        warnings.append("Package names should not contain underscores")

    if name in GO_BUILTINS:
        warnings.append(f"Package name '{name}' shadows a Go predeclared identifier")

    return errors, warnings
