"""Tests for Go code generation"""
import json

import pytest

from promc.codegen import (
    GeneratorConfig,
    MetricConfigError,
    SchemaValidationError,
    generate_from_config,
    quick_generate,
)
from promc.codegen.core.generator import GeneratorError, generate_code
from promc.codegen.core.schema import MetricKind, MetricSpec, build_metric_set
from promc.codegen.languages.go import (
    GoGenerator,
    GoMetric,
    MetricVariant,
    create_go_generator,
    format_go_source,
    variant_for,
)


EXPECTED_HTTP_REQUESTS = '''\
// Code generated by promc; DO NOT EDIT.

package metrics

import (
\t"github.com/prometheus/client_golang/prometheus"
)

// Register registers every metric declared in this file with reg, in
// declaration order, and returns the first registration error.
func Register(reg prometheus.Registerer) error {
\tfor _, collector := range []prometheus.Collector{
\t\tHttpRequestsTotal,
\t} {
\t\tif err := reg.Register(collector); err != nil {
\t\t\treturn err
\t\t}
\t}
\treturn nil
}

// MustRegister is like Register but panics if a metric cannot be registered.
func MustRegister(reg prometheus.Registerer) {
\tif err := Register(reg); err != nil {
\t\tpanic(err)
\t}
}

// HttpRequestsTotalLabels holds one value per http_requests_total label, in declaration order.
type HttpRequestsTotalLabels struct {
\tMethod string
\tStatus string
}

// HttpRequestsTotal is the http_requests_total counter, partitioned by method, status.
var HttpRequestsTotal = prometheus.NewCounterVec(
\tprometheus.CounterOpts{
\t\tName: "http_requests_total",
\t\tHelp: "Total HTTP requests.",
\t},
\t[]string{"method", "status"},
)

// IncHttpRequestsTotal increments http_requests_total for the given labels by one.
func IncHttpRequestsTotal(labels HttpRequestsTotalLabels) {
\tHttpRequestsTotal.With(prometheus.Labels{
\t\t"method": labels.Method,
\t\t"status": labels.Status,
\t}).Inc()
}
'''


def _generate(document, package_name="metrics", **settings):
    result = generate_from_config(
        json.dumps(document), package_name, config=GeneratorConfig(**settings)
    )
    assert result.success, result.error_message
    return result


class TestEndToEnd:
    """Test complete generation runs"""

    def test_http_requests_example(self, http_requests_config):
        result = _generate(http_requests_config)
        assert result.code == EXPECTED_HTTP_REQUESTS

    def test_output_is_deterministic(self, all_variants_config):
        first = _generate(all_variants_config).code
        second = _generate(all_variants_config).code
        assert first == second

    def test_output_is_already_canonical(self, all_variants_config):
        code = _generate(all_variants_config).code
        assert format_go_source(code) == code
        assert code.endswith("}\n")
        assert not code.endswith("\n\n")

    def test_yaml_input(self):
        content = (
            "metrics:\n"
            "  - name: http_requests_total\n"
            "    type: counter\n"
            "    labels: [method, status]\n"
            "    help: Total HTTP requests.\n"
        )
        result = generate_from_config(content, "metrics", fmt="yaml")
        assert result.code == EXPECTED_HTTP_REQUESTS

    def test_registers_every_metric_in_document_order(self, all_variants_config):
        code = _generate(all_variants_config).code
        start = code.index("[]prometheus.Collector{")
        end = code.index("} {", start)
        lines = code[start:end].splitlines()[1:]
        registered = [line.strip().rstrip(",") for line in lines if line.strip()]

        assert registered == [
            "JobsTotal",
            "ErrorsTotal",
            "QueueDepth",
            "PoolSize",
            "RequestSeconds",
            "ResponseBytes",
        ]

    def test_no_init_side_effect(self, all_variants_config):
        code = _generate(all_variants_config).code
        assert "func init()" not in code
        assert "func Register(reg prometheus.Registerer) error {" in code
        assert "func MustRegister(reg prometheus.Registerer) {" in code

    def test_empty_metric_set(self):
        result = _generate({"metrics": []})
        assert "\tfor _, collector := range []prometheus.Collector{} {\n" in result.code
        assert format_go_source(result.code) == result.code
        assert "Configuration declares no metrics" in result.warnings

    def test_schema_violation_raises(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            generate_from_config('{"metrics": [{"name": "x", "type": "summary"}]}', "metrics")
        assert exc_info.value.violations[0].path == "$.metrics[0].type"

    def test_semantic_violation_raises(self):
        document = {"metrics": [{"name": "latency", "type": "histogram"}]}
        with pytest.raises(MetricConfigError, match="latency"):
            generate_from_config(json.dumps(document), "metrics")

    def test_quick_generate(self, http_requests_config):
        assert quick_generate(json.dumps(http_requests_config)) == EXPECTED_HTTP_REQUESTS

    def test_quick_generate_raises_original_error(self):
        document = {"metrics": [{"name": "register", "type": "gauge"}]}
        with pytest.raises(MetricConfigError):
            quick_generate(json.dumps(document))


class TestVariants:
    """Test the kind and label-presence dispatch"""

    @pytest.mark.parametrize(
        "kind, labels, variant",
        [
            (MetricKind.COUNTER, (), MetricVariant.COUNTER),
            (MetricKind.COUNTER, ("a",), MetricVariant.COUNTER_VEC),
            (MetricKind.GAUGE, (), MetricVariant.GAUGE),
            (MetricKind.GAUGE, ("a",), MetricVariant.GAUGE_VEC),
            (MetricKind.HISTOGRAM, (), MetricVariant.HISTOGRAM),
            (MetricKind.HISTOGRAM, ("a",), MetricVariant.HISTOGRAM_VEC),
        ],
    )
    def test_variant_for(self, kind, labels, variant):
        buckets = (1.0,) if kind is MetricKind.HISTOGRAM else ()
        metric = MetricSpec(name="x", kind=kind, labels=labels, buckets=buckets)
        assert variant_for(metric) is variant

    def test_every_variant_has_an_emitter_and_template(self):
        generator = create_go_generator()
        assert set(generator.emitters) == set(MetricVariant)
        for variant in MetricVariant:
            assert generator.template_exists(variant.template_name)

    def test_unknown_kind_is_internal_error(self):
        metric = MetricSpec(name="x", kind="summary")
        with pytest.raises(GeneratorError):
            variant_for(metric)

    def test_counter(self, all_variants_config):
        code = _generate(all_variants_config).code
        assert "var JobsTotal = prometheus.NewCounter(\n" in code
        assert "func IncJobsTotal() {\n\tJobsTotal.Inc()\n}" in code

    def test_counter_vec(self, all_variants_config):
        code = _generate(all_variants_config).code
        assert "type ErrorsTotalLabels struct {\n\tCode string\n}" in code
        assert "var ErrorsTotal = prometheus.NewCounterVec(" in code
        assert "\t[]string{\"code\"},\n)" in code
        assert (
            "func IncErrorsTotal(labels ErrorsTotalLabels) {\n"
            "\tErrorsTotal.With(prometheus.Labels{\n"
            "\t\t\"code\": labels.Code,\n"
            "\t}).Inc()\n"
            "}"
        ) in code

    def test_gauge(self, all_variants_config):
        code = _generate(all_variants_config).code
        assert "var QueueDepth = prometheus.NewGauge(\n\tprometheus.GaugeOpts{" in code
        assert "func SetQueueDepth(value float64) {\n\tQueueDepth.Set(value)\n}" in code

    def test_gauge_vec(self, all_variants_config):
        code = _generate(all_variants_config).code
        assert "type PoolSizeLabels struct {\n\tPool string\n\tZone string\n}" in code
        assert "var PoolSize = prometheus.NewGaugeVec(" in code
        assert "func SetPoolSize(labels PoolSizeLabels, value float64) {" in code
        assert "\t}).Set(value)\n" in code

    def test_histogram(self, all_variants_config):
        code = _generate(all_variants_config).code
        assert (
            "var RequestSeconds = prometheus.NewHistogram(\n"
            "\tprometheus.HistogramOpts{\n"
            "\t\tName:    \"request_seconds\",\n"
            "\t\tHelp:    \"Request latency.\",\n"
            "\t\tBuckets: []float64{0.005, 0.1, 1, 2.5},\n"
            "\t},\n"
            ")"
        ) in code
        assert "func ObserveRequestSeconds(value float64) {\n\tRequestSeconds.Observe(value)\n}" in code

    def test_histogram_vec(self, all_variants_config):
        code = _generate(all_variants_config).code
        assert "var ResponseBytes = prometheus.NewHistogramVec(" in code
        assert "\t\tBuckets: []float64{100, 1000, 10000},\n" in code
        assert "func ObserveResponseBytes(labels ResponseBytesLabels, value float64) {" in code
        assert "\t}).Observe(value)\n" in code

    def test_single_metric_emission(self):
        generator = GoGenerator()
        metric = MetricSpec(name="up", kind=MetricKind.GAUGE, help="Is it up.")
        code = format_go_source(generator.generate_single_metric(metric))

        assert code.startswith("// Up is the up gauge.\nvar Up = prometheus.NewGauge(")
        assert "func SetUp(value float64) {" in code


class TestGoMetric:
    """Test the resolved template view of a metric"""

    def test_labeled_metric(self):
        metric = MetricSpec(
            name="http_requests_total",
            kind=MetricKind.COUNTER,
            labels=("method", "status_code"),
        )
        view = GoMetric.from_spec(metric)

        assert view.var_name == "HttpRequestsTotal"
        assert view.labels_type == "HttpRequestsTotalLabels"
        assert view.accessor == "IncHttpRequestsTotal"
        assert view.label_fields == (("method", "Method"), ("status_code", "StatusCode"))
        assert view.label_names_expr == '[]string{"method", "status_code"}'
        assert view.buckets_expr == ""

    def test_unlabeled_histogram(self):
        metric = MetricSpec(name="latency", kind=MetricKind.HISTOGRAM, buckets=(0.25, 1.0))
        view = GoMetric.from_spec(metric)

        assert view.labels_type == ""
        assert view.label_names_expr == ""
        assert view.accessor == "ObserveLatency"
        assert view.buckets_expr == "[]float64{0.25, 1}"


class TestFormattingDetails:
    """Test literal escaping and column alignment in generated code"""

    def test_help_text_is_escaped(self):
        document = {
            "metrics": [{"name": "up", "type": "gauge", "help": 'Say "hi"\nthen \\ leave'}]
        }
        code = _generate(document).code
        assert 'Help: "Say \\"hi\\"\\nthen \\\\ leave",' in code

    def test_struct_fields_are_aligned(self):
        document = {
            "metrics": [
                {"name": "x_total", "type": "counter", "labels": ["method", "status_code"]}
            ]
        }
        code = _generate(document).code
        assert "\tMethod     string\n\tStatusCode string\n" in code
        assert '\t\t"method":      labels.Method,\n\t\t"status_code": labels.StatusCode,\n' in code

    def test_no_comments(self, all_variants_config):
        code = _generate(all_variants_config, add_comments=False).code
        comment_lines = [line for line in code.splitlines() if line.startswith("//")]
        assert comment_lines == ["// Code generated by promc; DO NOT EDIT."]

    def test_custom_generator_name(self, http_requests_config):
        code = _generate(http_requests_config, generator_name="metricsgen").code
        assert code.startswith("// Code generated by metricsgen; DO NOT EDIT.\n")

    def test_client_import_alias(self, http_requests_config):
        code = _generate(http_requests_config, client_import="example.com/prom/v2").code
        assert 'import (\n\tprometheus "example.com/prom/v2"\n)' in code

    def test_default_client_import_has_no_alias(self, http_requests_config):
        code = _generate(http_requests_config).code
        assert '\t"github.com/prometheus/client_golang/prometheus"\n' in code


class TestIdentifierCollisions:
    """Test package-level identifier collisions"""

    def _failure(self, metrics, package_name="metrics"):
        metric_set = build_metric_set({"metrics": metrics}, package_name)
        result = generate_code(GoGenerator(), metric_set)
        assert not result.success
        assert result.code == ""
        return result.exception

    def test_metric_named_register(self):
        error = self._failure([{"name": "register", "type": "gauge"}])
        assert isinstance(error, MetricConfigError)
        assert error.metric_name == "register"

    def test_variable_collides_with_labels_type(self):
        error = self._failure(
            [
                {"name": "foo", "type": "counter", "labels": ["a"]},
                {"name": "foo_labels", "type": "gauge"},
            ]
        )
        assert isinstance(error, MetricConfigError)
        assert error.metric_name == "foo_labels"
        assert "FooLabels" in str(error)

    def test_variable_collides_with_accessor(self):
        error = self._failure(
            [
                {"name": "x", "type": "counter"},
                {"name": "inc_x", "type": "gauge"},
            ]
        )
        assert isinstance(error, MetricConfigError)
        assert "IncX" in str(error)

    def test_invalid_package_name(self):
        error = self._failure([], package_name="func")
        assert isinstance(error, MetricConfigError)
        assert "reserved word" in str(error)


class TestWarningsAndMetadata:
    """Test non-fatal warnings and result metadata"""

    def test_counter_naming_warning(self):
        result = _generate({"metrics": [{"name": "jobs", "type": "counter", "help": "Jobs."}]})
        assert any("'jobs'" in w and "_total" in w for w in result.warnings)

    def test_missing_help_warning(self):
        result = _generate({"metrics": [{"name": "up", "type": "gauge"}]})
        assert "Metric 'up' has no help text" in result.warnings

    def test_package_style_warning(self, http_requests_config):
        result = _generate(http_requests_config, package_name="my_metrics")
        assert any("underscores" in w for w in result.warnings)

    def test_clean_config_has_no_warnings(self, all_variants_config):
        assert _generate(all_variants_config).warnings == []

    def test_metadata(self, all_variants_config):
        metadata = _generate(all_variants_config).metadata

        assert metadata["language"] == "go"
        assert metadata["file_extension"] == ".go"
        assert metadata["package_name"] == "metrics"
        assert metadata["metric_count"] == 6
        assert metadata["counter_count"] == 2
        assert metadata["gauge_count"] == 2
        assert metadata["histogram_count"] == 2
        assert metadata["labeled_count"] == 3
