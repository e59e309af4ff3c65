"""
promc code generation module

Generates typed Prometheus metric accessors from a metric configuration
document: validate -> build model -> emit -> canonicalize.
"""

from typing import Union

from .core.generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .core.schema import (
    MetricConfigError,
    MetricKind,
    MetricSetDocument,
    MetricSpec,
    build_metric_set,
)
from .core.validation import SchemaValidationError, validate_config, validate_or_raise
from .core.config import ConfigError, GeneratorConfig, load_config
from .languages.go import GoGenerator, create_go_generator
from ..logging_config import get_logger

logger = get_logger(__name__)


def load_metric_set(
    content: Union[bytes, str], package_name: str, fmt: str = "json"
) -> MetricSetDocument:
    """
    Validate raw configuration content and build the metric model.

    Raises:
        SchemaValidationError: If the document is malformed or violates the schema
        MetricConfigError: If the document breaks a semantic rule
    """
    document = validate_or_raise(content, fmt)
    return build_metric_set(document, package_name)


def generate_from_config(
    content: Union[bytes, str],
    package_name: str,
    fmt: str = "json",
    config: GeneratorConfig = None,
) -> GenerationResult:
    """
    Generate Go metrics code from raw configuration content.

    Args:
        content: Raw configuration document
        package_name: Go package for the generated file
        fmt: Container format, ``json`` or ``yaml``
        config: Generator settings

    Returns:
        GenerationResult with generated code; a failed result carries the
        exception that stopped generation

    Raises:
        SchemaValidationError: If the document is malformed or violates the schema
        MetricConfigError: If the document breaks a semantic rule
    """
    metric_set = load_metric_set(content, package_name, fmt)
    logger.debug("Loaded %d metric(s)", len(metric_set.metrics))

    generator = create_go_generator(config)
    return generate_code(generator, metric_set)


def quick_generate(content: Union[bytes, str], package_name: str = "metrics", **options) -> str:
    """
    Quick code generation from a JSON document.

    Args:
        content: JSON configuration document
        package_name: Go package name
        **options: Generator settings overrides

    Returns:
        Generated code string
    """
    result = generate_from_config(content, package_name, config=load_config(options or None))

    if result.success:
        return result.code
    raise result.exception


__all__ = [
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "MetricConfigError",
    "MetricKind",
    "MetricSetDocument",
    "MetricSpec",
    "build_metric_set",
    "SchemaValidationError",
    "validate_config",
    "ConfigError",
    "GeneratorConfig",
    "load_config",
    "GoGenerator",
    "load_metric_set",
    "generate_from_config",
    "quick_generate",
]
