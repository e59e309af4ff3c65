"""
Core code generation components.

Provides the metric model, validation and base classes used by all
language generators.
"""

from .generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .schema import (
    MetricConfigError,
    MetricKind,
    MetricSetDocument,
    MetricSpec,
    build_metric,
    build_metric_set,
)
from .validation import (
    METRIC_CONFIG_SCHEMA,
    SchemaValidationError,
    SchemaValidator,
    ValidationReport,
    Violation,
    validate_config,
    validate_or_raise,
)
from .naming import IdentifierScope, NameCollisionError, snake_to_camel
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Metric model
    "MetricConfigError",
    "MetricKind",
    "MetricSetDocument",
    "MetricSpec",
    "build_metric",
    "build_metric_set",
    # Schema validation
    "METRIC_CONFIG_SCHEMA",
    "SchemaValidationError",
    "SchemaValidator",
    "ValidationReport",
    "Violation",
    "validate_config",
    "validate_or_raise",
    # Naming utilities
    "IdentifierScope",
    "NameCollisionError",
    "snake_to_camel",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
