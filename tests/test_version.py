"""Tests for the build identity file"""
import subprocess
from types import SimpleNamespace

import pytest

from promc.codegen.core.config import GeneratorConfig
from promc.codegen.core.generator import GeneratorError
from promc.codegen.languages.go import version


EXPECTED_VERSION_FILE = '''\
// Code generated by promc; DO NOT EDIT.

package main

var (
\tversion = "v1.2.3"
\tcommit  = "0123abcd"
)
'''


class TestRenderVersionFile:
    """Test rendering of the version artifact"""

    def test_render(self):
        assert version.render_version_file("v1.2.3", "0123abcd") == EXPECTED_VERSION_FILE

    def test_custom_package_and_banner(self):
        code = version.render_version_file(
            "v1", "abc", package_name="build", config=GeneratorConfig(generator_name="tool")
        )
        assert code.startswith("// Code generated by tool; DO NOT EDIT.\n\npackage build\n")

    def test_values_are_escaped(self):
        code = version.render_version_file('v"1', "abc")
        assert 'version = "v\\"1"' in code

    def test_invalid_package(self):
        with pytest.raises(GeneratorError, match="invalid Go package name"):
            version.render_version_file("v1", "abc", package_name="9lives")


class TestGitQueries:
    """Test git lookups with a patched subprocess"""

    def test_tag_and_commit(self, monkeypatch):
        calls = []

        def fake_run(args, **kwargs):
            calls.append((args, kwargs.get("cwd")))
            output = "v0.4.0\n" if "describe" in args else "deadbeef\n"
            return SimpleNamespace(stdout=output, returncode=0)

        monkeypatch.setattr(version.subprocess, "run", fake_run)

        assert version.get_latest_tag("/repo") == "v0.4.0"
        assert version.get_commit("/repo") == "deadbeef"
        assert calls == [
            (["git", "describe", "--tags", "--abbrev=0"], "/repo"),
            (["git", "rev-parse", "HEAD"], "/repo"),
        ]

    def test_git_missing(self, monkeypatch):
        def fake_run(args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(version.subprocess, "run", fake_run)
        assert version.get_latest_tag() == version.UNKNOWN
        assert version.get_commit() == version.UNKNOWN

    def test_git_failure(self, monkeypatch):
        def fake_run(args, **kwargs):
            raise subprocess.CalledProcessError(128, args)

        monkeypatch.setattr(version.subprocess, "run", fake_run)
        assert version.get_latest_tag() == "unknown"

    def test_empty_output(self, monkeypatch):
        monkeypatch.setattr(
            version.subprocess, "run", lambda args, **kwargs: SimpleNamespace(stdout="  \n")
        )
        assert version.get_commit() == "unknown"

    def test_generate_version_file(self, monkeypatch):
        monkeypatch.setattr(version, "get_latest_tag", lambda repo=None: "v1.2.3")
        monkeypatch.setattr(version, "get_commit", lambda repo=None: "0123abcd")

        assert version.generate_version_file() == EXPECTED_VERSION_FILE
