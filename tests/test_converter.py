"""Tests for the pandoc adapter, using stub executables instead of pandoc."""

import asyncio
from pathlib import Path

import pytest

from godot_llms.converter import PANDOC_FLAGS, ConversionError, PandocConverter


class TestBuildCommand:

    def test_flags(self):
        command = PandocConverter().build_command(Path("/tmp/document.rst"))
        assert command == [
            "pandoc", "/tmp/document.rst",
            "-f", "rst", "-t", "gfm", "--strip-comments", "--no-highlight", "--wrap=none",
        ]

    def test_extra_args_appended(self):
        command = PandocConverter("pandoc3", extra_args=["--columns=120"]).build_command(Path("doc.rst"))
        assert command[0] == "pandoc3"
        assert command[2:] == [*PANDOC_FLAGS, "--columns=120"]


class TestConvert:
    """Tests for subprocess handling and scratch-file cleanup."""

    def test_returns_stdout(self, make_stub_pandoc):
        stub = make_stub_pandoc('cat "$1"\n')
        text = "Title\n=====\n\nÜnïcode body.\n"

        assert asyncio.run(PandocConverter(str(stub)).convert(text)) == text

    def test_receives_conversion_flags(self, make_stub_pandoc):
        stub = make_stub_pandoc('shift\necho "$@"\n')
        output = asyncio.run(PandocConverter(str(stub)).convert("x"))
        assert output.strip() == " ".join(PANDOC_FLAGS)

    def test_scratch_removed_after_success(self, make_stub_pandoc):
        stub = make_stub_pandoc('echo "$1"\n')
        scratch_file = Path(asyncio.run(PandocConverter(str(stub)).convert("x")).strip())

        assert scratch_file.name == "document.rst"
        assert not scratch_file.parent.exists()

    def test_non_zero_exit(self, make_stub_pandoc):
        stub = make_stub_pandoc('echo "unexpected input" >&2\nexit 3\n')

        with pytest.raises(ConversionError) as excinfo:
            asyncio.run(PandocConverter(str(stub)).convert("x"))

        assert excinfo.value.returncode == 3
        assert excinfo.value.stderr == "unexpected input"
        assert "status 3" in str(excinfo.value)

    def test_scratch_removed_after_failure(self, make_stub_pandoc):
        stub = make_stub_pandoc('echo "$1" >&2\nexit 1\n')

        with pytest.raises(ConversionError) as excinfo:
            asyncio.run(PandocConverter(str(stub)).convert("x"))

        assert not Path(excinfo.value.stderr).parent.exists()

    def test_missing_executable(self, tmp_path):
        converter = PandocConverter(str(tmp_path / "no-such-pandoc"))

        with pytest.raises(ConversionError, match="not found"):
            asyncio.run(converter.convert("x"))


class TestCheckAvailable:

    def test_present(self, make_stub_pandoc):
        assert PandocConverter(str(make_stub_pandoc("exit 0\n"))).check_available()

    def test_absent(self, tmp_path):
        assert not PandocConverter(str(tmp_path / "no-such-pandoc")).check_available()
