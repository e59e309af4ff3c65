"""
Core metric model for code generation.

Converts a schema-validated configuration document into an immutable
MetricSetDocument that generators can work with consistently.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .naming import IdentifierScope, NameCollisionError, snake_to_camel
from ...logging_config import get_logger

logger = get_logger(__name__)

RESERVED_LABEL_PREFIX = "__"

# Label names the client library claims for itself, per kind
RESERVED_KIND_LABELS = {"histogram": ("le",)}


class MetricConfigError(Exception):
    """Raised for semantic errors in an otherwise well-formed document."""

    def __init__(
        self, message: str, metric_name: Optional[str] = None, field: Optional[str] = None
    ):
        self.metric_name = metric_name
        self.field = field
        if metric_name is not None:
            location = f"metric '{metric_name}'"
            if field:
                location += f" ({field})"
            message = f"{location}: {message}"
        super().__init__(message)


class MetricKind(Enum):
    """Supported metric kinds."""

    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


@dataclass(frozen=True)
class MetricSpec:
    """One declared metric."""

    name: str
    kind: MetricKind
    labels: Tuple[str, ...] = ()
    help: str = ""
    buckets: Tuple[float, ...] = ()

    @property
    def has_labels(self) -> bool:
        return bool(self.labels)

    @property
    def identifier(self) -> str:
        """CamelCase identifier derived from the metric name."""
        return snake_to_camel(self.name)

    @property
    def label_fields(self) -> Tuple[Tuple[str, str], ...]:
        """Pairs of (label key, CamelCase field name) in declared order."""
        return tuple((label, snake_to_camel(label)) for label in self.labels)


@dataclass(frozen=True)
class MetricSetDocument:
    """The whole generation unit: metrics in document order plus the package."""

    metrics: Tuple[MetricSpec, ...] = field(default_factory=tuple)
    package_name: str = ""

    def __len__(self) -> int:
        return len(self.metrics)

    def get_metric(self, name: str) -> Optional[MetricSpec]:
        """Get metric by name."""
        for metric in self.metrics:
            if metric.name == name:
                return metric
        return None

    def kind_summary(self) -> Dict[str, int]:
        """Count metrics per kind."""
        summary = {kind.value: 0 for kind in MetricKind}
        for metric in self.metrics:
            summary[metric.kind.value] += 1
        return summary


def _build_labels(name: str, kind: MetricKind, raw_labels: List[str]) -> Tuple[str, ...]:
    seen = set()
    fields = IdentifierScope(f"label set of '{name}'")
    reserved = RESERVED_KIND_LABELS.get(kind.value, ())

    for label in raw_labels:
        if label in seen:
            raise MetricConfigError(f"duplicate label '{label}'", name, "labels")
        seen.add(label)

        if label.startswith(RESERVED_LABEL_PREFIX):
            raise MetricConfigError(
                f"label '{label}' uses the reserved '{RESERVED_LABEL_PREFIX}' prefix",
                name,
                "labels",
            )

        if label in reserved:
            raise MetricConfigError(
                f"label '{label}' is reserved on a {kind.value}", name, "labels"
            )

        identifier = snake_to_camel(label)
        if not identifier or not identifier[0].isalpha():
            raise MetricConfigError(
                f"label '{label}' does not produce a usable identifier", name, "labels"
            )

        try:
            fields.claim(identifier, label)
        except NameCollisionError as e:
            raise MetricConfigError(str(e), name, "labels") from e

    return tuple(raw_labels)


def _build_buckets(name: str, kind: MetricKind, raw_buckets: List[float]) -> Tuple[float, ...]:
    if kind is not MetricKind.HISTOGRAM:
        if raw_buckets:
            raise MetricConfigError(
                f"buckets are only allowed on histograms, not on a {kind.value}",
                name,
                "buckets",
            )
        return ()

    if not raw_buckets:
        raise MetricConfigError("histogram requires a non-empty bucket list", name, "buckets")

    buckets = []
    for index, raw in enumerate(raw_buckets):
        try:
            buckets.append(float(raw))
        except OverflowError as e:
            raise MetricConfigError(
                f"bucket {index} is not a finite number (too large for a float64)",
                name,
                "buckets",
            ) from e

    for index, bound in enumerate(buckets):
        if not math.isfinite(bound):
            raise MetricConfigError(
                f"bucket {index} is not a finite number ({bound})", name, "buckets"
            )
        if index and bound <= buckets[index - 1]:
            raise MetricConfigError(
                f"buckets must be strictly increasing, but {bound:g} follows "
                f"{buckets[index - 1]:g}",
                name,
                "buckets",
            )
    return tuple(buckets)


def build_metric(entry: Dict[str, Any]) -> MetricSpec:
    """
    Build a single MetricSpec from a validated document entry.

    Raises:
        MetricConfigError: If the entry breaks a semantic rule
    """
    name = entry["name"]
    try:
        kind = MetricKind(entry["type"])
    except ValueError as e:
        raise MetricConfigError(f"unknown metric type '{entry['type']}'", name, "type") from e

    labels = _build_labels(name, kind, list(entry.get("labels") or []))
    buckets = _build_buckets(name, kind, list(entry.get("buckets") or []))

    return MetricSpec(
        name=name,
        kind=kind,
        labels=labels,
        help=entry.get("help") or "",
        buckets=buckets,
    )


def build_metric_set(document: Dict[str, Any], package_name: str) -> MetricSetDocument:
    """
    Convert a schema-validated document into a MetricSetDocument.

    Args:
        document: Decoded configuration that passed schema validation
        package_name: Namespace for the generated code, supplied by the caller

    Returns:
        Immutable MetricSetDocument preserving document order

    Raises:
        MetricConfigError: On the first semantic violation in document order
    """
    if not package_name or not package_name.strip():
        raise MetricConfigError("package name must not be empty")

    metrics = []
    names = set()
    identifiers = IdentifierScope("metric identifiers")

    for entry in document.get("metrics") or []:
        name = entry["name"]
        if name in names:
            raise MetricConfigError("duplicate metric name", name, "name")
        names.add(name)

        metric = build_metric(entry)
        try:
            identifiers.claim(metric.identifier, name)
        except NameCollisionError as e:
            raise MetricConfigError(str(e), name, "name") from e

        metrics.append(metric)

    logger.debug("Built metric set with %d metric(s) for package %s", len(metrics), package_name)
    return MetricSetDocument(metrics=tuple(metrics), package_name=package_name)
