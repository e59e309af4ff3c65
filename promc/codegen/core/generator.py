"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
from pathlib import Path

from .config import GeneratorConfig
from .schema import MetricSetDocument, MetricSpec
from .templates import TemplateEngine, create_template_engine
from ...logging_config import get_logger

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, document: MetricSetDocument) -> str:
        """
        Generate the complete source unit for a metric set.

        Args:
            document: Metric set to generate code for

        Returns:
            Generated (not yet canonicalized) code
        """
        pass

    @abstractmethod
    def generate_single_metric(self, metric: MetricSpec) -> str:
        """
        Generate declarations and accessors for one metric.

        Args:
            metric: Metric to generate code for

        Returns:
            Generated code for this metric only
        """
        pass

    def check_identifiers(self, document: MetricSetDocument) -> None:
        """
        Verify that derived identifiers do not collide in the target language.

        Raises:
            MetricConfigError: If two metrics would declare the same identifier
        """
        return None

    def validate_document(self, document: MetricSetDocument) -> List[str]:
        """
        Collect non-fatal warnings about a metric set.

        Language generators should override this to add language-specific checks.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        if not document.metrics:
            warnings.append("Configuration declares no metrics")

        for metric in document.metrics:
            if not metric.help:
                warnings.append(f"Metric '{metric.name}' has no help text")

        return warnings

    @abstractmethod
    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        pass

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, document: MetricSetDocument) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Any failure yields a failed GenerationResult carrying the original
    exception; no partial code is ever returned.

    Args:
        generator: Code generator instance
        document: Metric set to generate code for

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        generator.check_identifiers(document)

        warnings = generator.validate_document(document)
        for warning in warnings:
            logger.debug("Generation warning: %s", warning)

        code = generator.generate(document)
        formatted_code = generator.format_code(code)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "package_name": document.package_name,
            "metric_count": len(document.metrics),
            **{f"{kind}_count": count for kind, count in document.kind_summary().items()},
            "labeled_count": sum(1 for m in document.metrics if m.has_labels),
        }

        logger.info(
            "Generated %s code for %d metric(s)", generator.language_name, len(document.metrics)
        )
        return GenerationResult(formatted_code, warnings, metadata)

    except Exception as e:
        logger.debug("Code generation failed", exc_info=True)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
