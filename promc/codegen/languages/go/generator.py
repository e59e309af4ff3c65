"""
Go code generator implementation.

Generates Prometheus metric declarations and typed accessors for the
Go client library from a metric set.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator, GeneratorError
from ...core.naming import NameCollisionError
from ...core.schema import MetricConfigError, MetricKind, MetricSetDocument, MetricSpec
from ...core.templates import go_float_literal, go_string_literal
from ....logging_config import get_logger
from .format import format_go_source
from .naming import (
    accessor_name,
    create_package_scope,
    labels_type_name,
    validate_go_package_name,
)

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
FILE_TEMPLATE = "file.go.j2"
CLIENT_PACKAGE = "prometheus"


class MetricVariant(Enum):
    """One cell of the kind x label-presence dispatch table."""

    COUNTER = "counter"
    COUNTER_VEC = "counter_vec"
    GAUGE = "gauge"
    GAUGE_VEC = "gauge_vec"
    HISTOGRAM = "histogram"
    HISTOGRAM_VEC = "histogram_vec"

    @property
    def template_name(self) -> str:
        return f"{self.value}.go.j2"


_VARIANTS: Dict[Tuple[MetricKind, bool], MetricVariant] = {
    (MetricKind.COUNTER, False): MetricVariant.COUNTER,
    (MetricKind.COUNTER, True): MetricVariant.COUNTER_VEC,
    (MetricKind.GAUGE, False): MetricVariant.GAUGE,
    (MetricKind.GAUGE, True): MetricVariant.GAUGE_VEC,
    (MetricKind.HISTOGRAM, False): MetricVariant.HISTOGRAM,
    (MetricKind.HISTOGRAM, True): MetricVariant.HISTOGRAM_VEC,
}

# Accessor verb per kind
VERBS: Dict[MetricKind, str] = {
    MetricKind.COUNTER: "Inc",
    MetricKind.GAUGE: "Set",
    MetricKind.HISTOGRAM: "Observe",
}


def variant_for(metric: MetricSpec) -> MetricVariant:
    """
    Select the emission variant for a metric.

    Raises:
        GeneratorError: If the metric kind is not one the generator knows;
            validation should have rejected it earlier
    """
    try:
        return _VARIANTS[(metric.kind, metric.has_labels)]
    except KeyError:
        raise GeneratorError(
            f"no emission variant for metric '{metric.name}' of kind {metric.kind!r}"
        ) from None


@dataclass(frozen=True)
class GoMetric:
    """Template view of one metric with every Go identifier resolved."""

    name: str
    help: str
    labels: Tuple[str, ...]
    var_name: str
    labels_type: str
    accessor: str
    label_fields: Tuple[Tuple[str, str], ...]
    label_names_expr: str
    buckets_expr: str

    @classmethod
    def from_spec(cls, metric: MetricSpec) -> "GoMetric":
        identifier = metric.identifier
        label_names = ", ".join(go_string_literal(label) for label in metric.labels)
        buckets = ", ".join(go_float_literal(bound) for bound in metric.buckets)
        return cls(
            name=metric.name,
            help=metric.help,
            labels=metric.labels,
            var_name=identifier,
            labels_type=labels_type_name(identifier) if metric.has_labels else "",
            accessor=accessor_name(VERBS[metric.kind], identifier),
            label_fields=metric.label_fields,
            label_names_expr=f"[]string{{{label_names}}}" if metric.has_labels else "",
            buckets_expr=f"[]float64{{{buckets}}}" if metric.buckets else "",
        )


class GoGenerator(CodeGenerator):
    """Code generator for Prometheus metrics in Go."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Go generator with configuration."""
        super().__init__(config)

        # One explicit emission function per variant
        self._emitters: Dict[MetricVariant, Callable[[GoMetric], str]] = {
            MetricVariant.COUNTER: self._emit_counter,
            MetricVariant.COUNTER_VEC: self._emit_counter_vec,
            MetricVariant.GAUGE: self._emit_gauge,
            MetricVariant.GAUGE_VEC: self._emit_gauge_vec,
            MetricVariant.HISTOGRAM: self._emit_histogram,
            MetricVariant.HISTOGRAM_VEC: self._emit_histogram_vec,
        }

    def get_template_directory(self) -> Optional[Path]:
        """Return the Go templates directory."""
        return TEMPLATE_DIR if TEMPLATE_DIR.exists() else None

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    @property
    def emitters(self) -> Dict[MetricVariant, Callable[[GoMetric], str]]:
        """Mapping of every variant to its emission function."""
        return dict(self._emitters)

    def check_identifiers(self, document: MetricSetDocument) -> None:
        """Reject package names and package-level identifiers Go cannot accept."""
        errors, _ = validate_go_package_name(document.package_name)
        if errors:
            raise MetricConfigError(
                f"invalid Go package name '{document.package_name}': {'; '.join(errors)}"
            )

        scope = create_package_scope()
        for metric in document.metrics:
            go_metric = GoMetric.from_spec(metric)
            declared = [go_metric.var_name, go_metric.accessor]
            if go_metric.labels_type:
                declared.append(go_metric.labels_type)
            try:
                for identifier in declared:
                    scope.claim(identifier, metric.name)
            except NameCollisionError as e:
                raise MetricConfigError(str(e), metric.name, "name") from e

    def validate_document(self, document: MetricSetDocument) -> List[str]:
        """Collect warnings about conventions the generated code would break."""
        warnings = super().validate_document(document)

        _, package_warnings = validate_go_package_name(document.package_name)
        warnings.extend(
            f"Package '{document.package_name}': {warning}" for warning in package_warnings
        )

        for metric in document.metrics:
            if metric.kind is MetricKind.COUNTER and not metric.name.endswith("_total"):
                warnings.append(
                    f"Counter '{metric.name}' should end in '_total' by Prometheus convention"
                )

        return warnings

    def generate(self, document: MetricSetDocument) -> str:
        """Generate the complete Go file for a metric set."""
        if not self.template_exists(FILE_TEMPLATE):
            raise GeneratorError(f"{FILE_TEMPLATE} template not found")

        metrics = [GoMetric.from_spec(metric) for metric in document.metrics]
        blocks = [self.generate_single_metric(metric) for metric in document.metrics]

        context = {
            "generator_name": self.config.generator_name,
            "package_name": document.package_name,
            "client_import": self.config.client_import,
            "client_alias": self._client_alias(),
            "add_comments": self.config.add_comments,
            "metrics": metrics,
            "metric_blocks": [block.strip("\n") for block in blocks],
        }

        return self.render_template(FILE_TEMPLATE, context)

    def generate_single_metric(self, metric: MetricSpec) -> str:
        """Generate the declarations and accessor for one metric."""
        variant = variant_for(metric)
        logger.debug("Emitting %s as %s", metric.name, variant.value)
        return self._emitters[variant](GoMetric.from_spec(metric))

    def format_code(self, code: str) -> str:
        """Canonicalize the generated Go source."""
        return format_go_source(code)

    def _client_alias(self) -> str:
        # The templates always refer to the client as "prometheus"
        last_segment = self.config.client_import.rstrip("/").rsplit("/", 1)[-1]
        return "" if last_segment == CLIENT_PACKAGE else CLIENT_PACKAGE

    def _render_variant(self, variant: MetricVariant, metric: GoMetric) -> str:
        return self.render_template(
            variant.template_name,
            {"metric": metric, "add_comments": self.config.add_comments},
        )

    def _emit_counter(self, metric: GoMetric) -> str:
        return self._render_variant(MetricVariant.COUNTER, metric)

    def _emit_counter_vec(self, metric: GoMetric) -> str:
        return self._render_variant(MetricVariant.COUNTER_VEC, metric)

    def _emit_gauge(self, metric: GoMetric) -> str:
        return self._render_variant(MetricVariant.GAUGE, metric)

    def _emit_gauge_vec(self, metric: GoMetric) -> str:
        return self._render_variant(MetricVariant.GAUGE_VEC, metric)

    def _emit_histogram(self, metric: GoMetric) -> str:
        return self._render_variant(MetricVariant.HISTOGRAM, metric)

    def _emit_histogram_vec(self, metric: GoMetric) -> str:
        return self._render_variant(MetricVariant.HISTOGRAM_VEC, metric)


def create_go_generator(config: Optional[GeneratorConfig] = None) -> GoGenerator:
    """Create a Go generator with default configuration."""
    return GoGenerator(config or GeneratorConfig())
