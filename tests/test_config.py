"""Unit tests for configuration loading and layering."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from godot_llms.config import (
    ConverterConfig,
    GitConfig,
    env_overrides,
    load_config,
    load_config_file,
)
from godot_llms.schemas import LanguageFilter


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test where no converter.config.json exists."""
    monkeypatch.chdir(tmp_path)


def write_config(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestDefaults:

    def test_converter_defaults(self):
        config = ConverterConfig()
        assert config.excluded_directories == ["about", "community", "contributing", "tutorials"]
        assert config.godot_docs_path == Path("./godot-docs")
        assert config.output_file == Path("./llms.md")
        assert config.concurrency == 5
        assert config.language is LanguageFilter.BOTH
        assert config.pandoc_path == "pandoc"
        assert config.include_header is False

    def test_git_defaults(self):
        git_config = GitConfig()
        assert git_config.enabled is True
        assert git_config.repository == "https://github.com/godotengine/godot-docs.git"
        assert git_config.branch == "master"
        assert git_config.auto_update is True

    def test_concurrency_must_be_positive(self):
        with pytest.raises(ValidationError):
            ConverterConfig(concurrency=0)

    def test_unknown_language_rejected(self):
        with pytest.raises(ValidationError):
            ConverterConfig(language="python")


class TestLoadConfigFile:

    def test_missing_default_file_is_empty(self):
        assert load_config_file() == {}

    def test_default_file_picked_up(self, tmp_path):
        write_config(tmp_path / "converter.config.json", {"concurrency": 2})
        assert load_config_file() == {"concurrency": 2}

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            load_config_file(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config_file(path)

    def test_non_object(self, tmp_path):
        path = write_config(tmp_path / "list.json", ["about"])
        with pytest.raises(ValueError, match="JSON object"):
            load_config_file(path)


class TestEnvOverrides:

    def test_known_variables(self):
        overrides = env_overrides({
            "GODOT_LLMS_LANGUAGE": "csharp",
            "GODOT_LLMS_CONCURRENCY": "8",
            "GODOT_LLMS_OUTPUT": "out/llms.md",
            "UNRELATED": "x",
        })
        assert overrides == {"language": "csharp", "concurrency": "8", "output_file": "out/llms.md"}

    def test_empty_values_ignored(self):
        assert env_overrides({"GODOT_LLMS_PANDOC": ""}) == {}


class TestLoadConfig:
    """Tests for defaults -> file -> environment -> overrides layering."""

    def test_camel_case_file(self, tmp_path):
        path = write_config(tmp_path / "converter.config.json", {
            "godotDocsPath": "./docs",
            "outputFile": "./build/llms.md",
            "excludedDirectories": ["about"],
            "concurrency": 3,
            "language": "gdscript",
            "git": {"autoUpdate": False},
        })

        config = load_config(path, environ={})

        assert config.godot_docs_path == Path("./docs")
        assert config.output_file == Path("./build/llms.md")
        assert config.excluded_directories == ["about"]
        assert config.concurrency == 3
        assert config.language is LanguageFilter.GDSCRIPT
        assert config.git.auto_update is False

    def test_nested_git_merges_field_wise(self, tmp_path):
        path = write_config(tmp_path / "c.json", {"git": {"branch": "4.3"}})

        config = load_config(path, environ={})

        assert config.git.branch == "4.3"
        assert config.git.repository == "https://github.com/godotengine/godot-docs.git"
        assert config.git.enabled is True

    def test_snake_case_keys_accepted(self, tmp_path):
        path = write_config(tmp_path / "c.json", {"godot_docs_path": "./snake", "include_header": True})
        config = load_config(path, environ={})
        assert config.godot_docs_path == Path("./snake")
        assert config.include_header is True

    def test_precedence(self, tmp_path):
        path = write_config(tmp_path / "c.json", {"concurrency": 2, "language": "gdscript"})

        config = load_config(
            path,
            overrides={"concurrency": 9, "language": None},
            environ={"GODOT_LLMS_CONCURRENCY": "4", "GODOT_LLMS_LANGUAGE": "csharp"},
        )

        # CLI beats environment; a None override leaves the environment value
        assert config.concurrency == 9
        assert config.language is LanguageFilter.CSHARP

    def test_environment_beats_file(self, tmp_path):
        path = write_config(tmp_path / "c.json", {"concurrency": 2})
        config = load_config(path, environ={"GODOT_LLMS_CONCURRENCY": "6"})
        assert config.concurrency == 6

    def test_git_override_from_cli(self):
        config = load_config(overrides={"git": {"enabled": False}}, environ={})
        assert config.git.enabled is False
        assert config.git.branch == "master"

    def test_invalid_value_in_file(self, tmp_path):
        path = write_config(tmp_path / "c.json", {"concurrency": -1})
        with pytest.raises(ValidationError):
            load_config(path, environ={})

    def test_dump_uses_original_key_names(self):
        dumped = json.loads(ConverterConfig().model_dump_json(by_alias=True))
        assert "godotDocsPath" in dumped
        assert "excludedDirectories" in dumped
        assert dumped["git"]["autoUpdate"] is True
