"""Shared fixtures for promc tests"""
import json

import pytest

from promc.codegen.core.schema import build_metric_set


HTTP_REQUESTS_CONFIG = {
    "metrics": [
        {
            "name": "http_requests_total",
            "type": "counter",
            "labels": ["method", "status"],
            "help": "Total HTTP requests.",
        }
    ]
}

ALL_VARIANTS_CONFIG = {
    "metrics": [
        {"name": "jobs_total", "type": "counter", "help": "Jobs processed."},
        {
            "name": "errors_total",
            "type": "counter",
            "labels": ["code"],
            "help": "Errors by code.",
        },
        {"name": "queue_depth", "type": "gauge", "help": "Items waiting."},
        {
            "name": "pool_size",
            "type": "gauge",
            "labels": ["pool", "zone"],
            "help": "Pool size.",
        },
        {
            "name": "request_seconds",
            "type": "histogram",
            "help": "Request latency.",
            "buckets": [0.005, 0.1, 1, 2.5],
        },
        {
            "name": "response_bytes",
            "type": "histogram",
            "labels": ["route"],
            "help": "Response size.",
            "buckets": [100, 1000, 10000],
        },
    ]
}


@pytest.fixture
def http_requests_config():
    """Single labeled counter document"""
    return json.loads(json.dumps(HTTP_REQUESTS_CONFIG))


@pytest.fixture
def all_variants_config():
    """One metric for every kind and label-presence combination"""
    return json.loads(json.dumps(ALL_VARIANTS_CONFIG))


@pytest.fixture
def all_variants_set(all_variants_config):
    """Built metric set for the all-variants document"""
    return build_metric_set(all_variants_config, "metrics")


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration document to a file and return its path"""

    def _write(document, name="metrics.json"):
        path = tmp_path / name
        if isinstance(document, (dict, list)):
            path.write_text(json.dumps(document), encoding="utf-8")
        else:
            path.write_text(document, encoding="utf-8")
        return path

    return _write
