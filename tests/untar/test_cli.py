"""Tests for the artifact-unpack command."""

import io
import os
import sys

import pytest
from artifact_unpack.common import ConfigLoader
from artifact_unpack.untar import cli
from artifact_unpack.untar.config import UntarConfig


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep host and user config files out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(ConfigLoader, "_load_system_config", lambda self: None)
    monkeypatch.setattr(ConfigLoader, "_load_user_config", lambda self: None)
    for key in list(os.environ):
        if key.startswith("ARTIFACT_UNPACK_"):
            monkeypatch.delenv(key)


@pytest.fixture
def archive_file(tmp_path, targz):
    path = tmp_path / "release.tar.gz"
    path.write_bytes(
        targz()
        .directory("release/")
        .file("release/bin/app", b"#!/bin/sh\necho hi\n", mode=0o755)
        .file("release/README", b"readme")
        .build()
    )
    return path


class TestMain:
    """Tests for main()."""

    def test_extracts_archive(self, tmp_path, archive_file):
        """Test a successful extraction with command-line overrides."""
        dest = tmp_path / "out"

        code = cli.main([str(archive_file), "--dest-dir", str(dest), "--archive-root", "release"])

        assert code == 0
        assert (dest / "bin" / "app").read_bytes() == b"#!/bin/sh\necho hi\n"
        assert (dest / "README").read_bytes() == b"readme"

    def test_uses_config_file(self, tmp_path, archive_file):
        """Test that settings come from the given config file."""
        dest = tmp_path / "configured"
        config_path = tmp_path / "unpack.toml"
        config_path.write_text(
            "[logging]\n"
            'level = "WARNING"\n'
            'format = "simple"\n'
            "\n"
            "[extraction]\n"
            f'dest_dir = "{dest.as_posix()}"\n'
            'archive_root = "release"\n'
        )

        code = cli.main([str(archive_file), "--config", str(config_path)])

        assert code == 0
        assert (dest / "README").read_bytes() == b"readme"

    def test_environment_override(self, tmp_path, archive_file, monkeypatch):
        """Test that environment variables configure the extraction."""
        dest = tmp_path / "from-env"
        monkeypatch.setenv("ARTIFACT_UNPACK_EXTRACTION__DEST_DIR", str(dest))
        monkeypatch.setenv("ARTIFACT_UNPACK_EXTRACTION__ARCHIVE_ROOT", "release")

        assert cli.main([str(archive_file)]) == 0
        assert (dest / "README").exists()

    def test_reads_standard_input(self, tmp_path, targz, monkeypatch):
        """Test that '-' reads the archive from standard input."""
        data = targz().file("piped.txt", b"from stdin").build()
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))
        dest = tmp_path / "stdin-out"
        dest.mkdir()

        assert cli.main(["-", "--dest-dir", str(dest)]) == 0
        assert (dest / "piped.txt").read_bytes() == b"from stdin"

    def test_unsafe_archive_fails(self, tmp_path, targz):
        """Test that a traversal entry gives a non-zero exit code."""
        archive = tmp_path / "evil.tar.gz"
        archive.write_bytes(targz().file("../escaped.txt", b"evil").build())

        code = cli.main([str(archive), "--dest-dir", str(tmp_path / "out")])

        assert code == 1
        assert not (tmp_path / "escaped.txt").exists()

    def test_missing_archive_fails(self, tmp_path):
        """Test that a missing archive gives a non-zero exit code."""
        code = cli.main([str(tmp_path / "nope.tar.gz"), "--dest-dir", str(tmp_path / "out")])

        assert code == 1

    def test_writes_log_file(self, tmp_path, archive_file):
        """Test that a configured log file receives JSON records."""
        log_file = tmp_path / "logs" / "unpack.log"
        config_path = tmp_path / "unpack.toml"
        config_path.write_text(f'[logging]\nfile = "{log_file.as_posix()}"\n')

        code = cli.main([str(archive_file), "--config", str(config_path),
                         "--dest-dir", str(tmp_path / "out"), "--archive-root", "release"])

        assert code == 0
        assert '"archive": ' in log_file.read_text()


class TestExtractCommand:
    """Tests for extract_command()."""

    def test_command_line_root_overrides_config(self, tmp_path, archive_file):
        """Test that an empty --archive-root still overrides the config value."""
        config = UntarConfig(extraction={"archive_root": "release"})
        dest = tmp_path / "out"

        code = cli.extract_command(config, str(archive_file), dest, archive_root_override="")

        assert code == 0
        assert (dest / "release" / "README").exists()
