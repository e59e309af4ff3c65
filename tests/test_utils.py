"""Tests for document loading and atomic output"""
import os
import stat

import pytest

from promc import utils
from promc.utils import (
    DocumentLoadError,
    OutputWriteError,
    detect_format,
    load_document,
    write_text_atomic,
)


class TestLoadDocument:
    """Test reading configuration files"""

    @pytest.mark.parametrize(
        "name, fmt",
        [
            ("metrics.json", "json"),
            ("metrics.yaml", "yaml"),
            ("metrics.YML", "yaml"),
            ("metrics.conf", "json"),
        ],
    )
    def test_detect_format(self, name, fmt):
        assert detect_format(name) == fmt

    def test_reads_bytes(self, tmp_path):
        path = tmp_path / "metrics.yaml"
        path.write_bytes(b"metrics: []\n")

        assert load_document(path) == ("yaml", b"metrics: []\n")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError, match="File not found"):
            load_document(tmp_path / "missing.json")

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(DocumentLoadError):
            load_document(tmp_path)


class TestWriteTextAtomic:
    """Test atomic replacement of output files"""

    def test_creates_file(self, tmp_path):
        target = tmp_path / "metrics.go"

        assert write_text_atomic(target, "package metrics\n") == target
        assert target.read_text(encoding="utf-8") == "package metrics\n"
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_replaces_and_keeps_mode(self, tmp_path):
        target = tmp_path / "metrics.go"
        target.write_text("old\n", encoding="utf-8")
        os.chmod(target, 0o600)

        write_text_atomic(target, "new\n")

        assert target.read_text(encoding="utf-8") == "new\n"
        assert stat.S_IMODE(target.stat().st_mode) == 0o600

    def test_leaves_no_temporary_files(self, tmp_path):
        write_text_atomic(tmp_path / "metrics.go", "package metrics\n")
        assert [p.name for p in tmp_path.iterdir()] == ["metrics.go"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(OutputWriteError, match="does not exist"):
            write_text_atomic(tmp_path / "nope" / "metrics.go", "x")

    def test_failed_replace_keeps_destination(self, tmp_path, monkeypatch):
        target = tmp_path / "metrics.go"
        target.write_text("old\n", encoding="utf-8")

        def broken_replace(src, dst):
            raise PermissionError("denied")

        monkeypatch.setattr(utils.os, "replace", broken_replace)

        with pytest.raises(OutputWriteError, match="denied"):
            write_text_atomic(target, "new\n")

        assert target.read_text(encoding="utf-8") == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["metrics.go"]
