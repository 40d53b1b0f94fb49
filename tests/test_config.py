"""Tests for configuration models and source layering."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from starship_jj.bookmarks import IgnoreEmpty
from starship_jj.config import Config, default_config_path, load_config
from starship_jj.exceptions import ConfigurationError
from starship_jj.modules import Bookmarks, Commit, Metrics, State, Symbol
from starship_jj.style import parse_color

PROMPT_TOML = """
module_separator = "|"
timeout = 50

[bookmarks]
search_depth = 10
exclude = ["push-*"]

[[module]]
type = "Bookmarks"
max_bookmarks = 3
color = "Green"
ignore_empty_commits = "All"

[[module]]
type = "Commit"
max_length = 40

[module.style]
italic = true
"""


@pytest.fixture
def toml_file(tmp_path: Path) -> Path:
    path = tmp_path / "starship-jj.toml"
    path.write_text(PROMPT_TOML, encoding="utf-8")
    return path


class TestDefaults:
    def test_global_defaults(self):
        config = Config()
        assert config.module_separator == " "
        assert config.timeout is None
        assert config.reset_color is True
        assert config.bookmarks.search_depth == 100
        assert config.bookmarks.exclude == []

    def test_default_modules(self):
        assert [type(m) for m in Config().modules] == [Symbol, Bookmarks, Commit, State, Metrics]

    def test_dump_uses_file_keys(self):
        dumped = Config().dump()
        assert "module" in dumped
        assert [m["type"] for m in dumped["module"]] == ["Symbol", "Bookmarks", "Commit", "State", "Metrics"]

    def test_dump_round_trips(self):
        assert Config.model_validate(Config().dump()) == Config()

    def test_schema_has_module_union(self):
        schema = Config.model_json_schema()
        assert "module" in schema["properties"]


class TestFile:
    """TOML and JSON config files."""

    def test_toml(self, toml_file: Path):
        config = load_config(toml_file, dotenv=False)
        assert config.module_separator == "|"
        assert config.timeout == 50
        assert config.bookmarks.search_depth == 10
        assert config.bookmarks.exclude == ["push-*"]

        bookmarks, commit = config.modules
        assert isinstance(bookmarks, Bookmarks)
        assert bookmarks.max_bookmarks == 3
        assert bookmarks.style.color == parse_color("Green")
        assert bookmarks.ignore_empty_commits is IgnoreEmpty.ALL
        assert isinstance(commit, Commit)
        assert commit.max_length == 40
        assert commit.style.italic is True

    def test_json(self, tmp_path: Path):
        path = tmp_path / "prompt.json"
        path.write_text(json.dumps({"reset_color": False, "module": [{"type": "Symbol", "symbol": "jj"}]}))
        config = load_config(path, dotenv=False)
        assert config.reset_color is False
        assert config.modules == [Symbol(symbol="jj")]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.toml", dotenv=False)

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("module_separator = ", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config(path, dotenv=False)

    def test_invalid_colour(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text('[[module]]\ntype = "Symbol"\ncolor = "Mauve"\n', encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(path, dotenv=False)

    def test_unknown_module_type(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text('[[module]]\ntype = "Branch"\n', encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path, dotenv=False)

    def test_unknown_global_key(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("colour = true\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path, dotenv=False)

    def test_default_path_used(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "starship-jj.toml"
        path.write_text('module_separator = "::"\n', encoding="utf-8")
        monkeypatch.setattr("starship_jj.config.loader.default_config_path", lambda: path)
        assert load_config(dotenv=False).module_separator == "::"

    def test_no_file_means_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("starship_jj.config.loader.default_config_path", lambda: tmp_path / "absent.toml")
        assert load_config(dotenv=False) == Config()


class TestEnvironment:
    """SJJ__ variables override the file."""

    @pytest.fixture(autouse=True)
    def no_user_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("starship_jj.config.loader.default_config_path", lambda: tmp_path / "absent.toml")

    def test_scalars(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SJJ__TIMEOUT", "25")
        monkeypatch.setenv("SJJ__BOOKMARKS__SEARCH_DEPTH", "7")
        monkeypatch.setenv("SJJ__MODULE_SEPARATOR", " | ")
        config = load_config(dotenv=False)
        assert config.timeout == 25
        assert config.bookmarks.search_depth == 7
        assert config.module_separator == " | "

    def test_numeric_string_kept_as_text(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SJJ__MODULE_SEPARATOR", "1")
        assert load_config(dotenv=False).module_separator == "1"

    def test_lower_case_names(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("sjj__reset_color", "false")
        assert load_config(dotenv=False).reset_color is False

    def test_unrelated_variables_ignored(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SJJ__NOT_A_SETTING", "1")
        monkeypatch.setenv("HOME_SEPARATOR", "x")
        assert load_config(dotenv=False) == Config.defaults()

    def test_env_beats_file(self, toml_file: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SJJ__BOOKMARKS__SEARCH_DEPTH", "3")
        monkeypatch.setenv("SJJ__RESET_COLOR", "false")
        config = load_config(toml_file, dotenv=False)
        assert config.bookmarks.search_depth == 3
        assert config.bookmarks.exclude == ["push-*"]
        assert config.reset_color is False
        assert config.timeout == 50

    def test_env_module_list(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SJJ__MODULE", '[{"type": "State"}]')
        assert load_config(dotenv=False).modules == [State()]

    def test_malformed_json_value(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SJJ__MODULE", "[{")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(dotenv=False)

    def test_invalid_value(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SJJ__TIMEOUT", "soon")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(dotenv=False)

    def test_dotenv_loaded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(os, "environ", dict(os.environ))
        (tmp_path / ".env").write_text("SJJ__TIMEOUT=99\n", encoding="utf-8")
        assert load_config().timeout == 99

    def test_defaults_ignore_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SJJ__MODULE_SEPARATOR", "|")
        assert Config().module_separator == "|"
        assert Config.defaults().module_separator == " "


def test_default_config_path_name():
    assert default_config_path().name == "starship-jj.toml"
