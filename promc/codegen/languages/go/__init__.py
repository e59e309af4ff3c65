"""
Go code generator module.

Generates Prometheus metric declarations and typed accessors for the
Go client library.
"""

from .format import FormatError, format_go_source
from .generator import (
    GoGenerator,
    GoMetric,
    MetricVariant,
    VERBS,
    create_go_generator,
    variant_for,
)
from .naming import validate_go_package_name
from .version import generate_version_file, render_version_file

__all__ = [
    "GoGenerator",
    "GoMetric",
    "MetricVariant",
    "VERBS",
    "create_go_generator",
    "variant_for",
    "FormatError",
    "format_go_source",
    "validate_go_package_name",
    "generate_version_file",
    "render_version_file",
]
