"""End-to-end tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from godot_llms import __version__
from godot_llms.cli import app

from conftest import write_file

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """No config file, .env or GODOT_LLMS_* variables leak into a run."""
    monkeypatch.chdir(tmp_path)
    for variable in ("GODOT_LLMS_LANGUAGE", "GODOT_LLMS_CONCURRENCY", "GODOT_LLMS_DOCS_PATH",
                     "GODOT_LLMS_OUTPUT", "GODOT_LLMS_PANDOC"):
        monkeypatch.delenv(variable, raising=False)


class TestVersion:

    def test_prints_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestShowConfig:

    def test_effective_config(self, tmp_path):
        write_file(tmp_path / "converter.config.json", json.dumps({"concurrency": 7}))

        result = runner.invoke(app, ["show-config"])

        assert result.exit_code == 0
        assert '"godotDocsPath"' in result.output
        assert '"concurrency": 7' in result.output

    def test_invalid_config_file(self, tmp_path):
        write_file(tmp_path / "bad.json", "{")

        result = runner.invoke(app, ["show-config", "--config", str(tmp_path / "bad.json")])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestConvert:
    """Tests for the convert command with a stub pandoc."""

    def test_converts_docs_tree(self, tmp_path, docs_tree, make_stub_pandoc):
        stub = make_stub_pandoc('cat "$1"\n')
        output = tmp_path / "out" / "llms.md"

        result = runner.invoke(app, [
            "convert",
            "--docs-path", str(docs_tree),
            "--output", str(output),
            "--pandoc", str(stub),
            "--no-git",
        ])

        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert text.startswith("## classes/about/nested.rst\n\nnested about\n\n")
        assert "## classes/class_node2d.rst\n\nNode2D\n\n## classes/class_sprite2d.rst" in text
        assert "## about/introduction.rst" not in text
        assert "## index.rst" not in text
        assert "included" in result.output

    def test_header_option(self, tmp_path, docs_tree, make_stub_pandoc):
        stub = make_stub_pandoc('cat "$1"\n')
        output = tmp_path / "llms.md"

        result = runner.invoke(app, [
            "convert", "--docs-path", str(docs_tree), "-o", str(output),
            "--pandoc", str(stub), "--no-git", "--header", "--language", "gdscript",
        ])

        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert text.startswith("# Godot Documentation - LLM Reference\n")
        assert "Language filter: gdscript" in text

    def test_failing_documents_skipped(self, tmp_path, docs_tree, make_stub_pandoc):
        stub = make_stub_pandoc('grep -q Sprite2D "$1" && exit 2\ncat "$1"\n')
        output = tmp_path / "llms.md"

        result = runner.invoke(app, [
            "convert", "--docs-path", str(docs_tree), "-o", str(output),
            "--pandoc", str(stub), "--no-git",
        ])

        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert "## classes/class_node2d.rst" in text
        assert "class_sprite2d.rst" not in text

    def test_missing_docs_directory(self, tmp_path, make_stub_pandoc):
        stub = make_stub_pandoc('cat "$1"\n')

        result = runner.invoke(app, [
            "convert", "--docs-path", str(tmp_path / "absent"), "--pandoc", str(stub), "--no-git",
        ])

        assert result.exit_code == 1
        assert "does not exist" in " ".join(result.output.split())

    def test_missing_pandoc(self, tmp_path, docs_tree):
        result = runner.invoke(app, [
            "convert", "--docs-path", str(docs_tree),
            "--pandoc", str(tmp_path / "no-such-pandoc"), "--no-git",
        ])

        assert result.exit_code == 1
        assert "pandoc executable not found" in " ".join(result.output.split())

    def test_invalid_concurrency(self, docs_tree):
        result = runner.invoke(app, ["convert", "--docs-path", str(docs_tree), "--concurrency", "0", "--no-git"])
        assert result.exit_code == 1
