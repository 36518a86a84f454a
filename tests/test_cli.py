"""Tests for aliasgen.cli: the typer command line."""

import json
import sys

import pytest
from typer.testing import CliRunner

from aliasgen.cli import app, main
from aliasgen.config import load_config, save_config

from conftest import FakeCompletion

runner = CliRunner()


@pytest.fixture
def config_dir(tmp_path):
    path = tmp_path / "config"
    config = load_config(path)
    config.api_key = "sk-test"
    save_config(config)
    return path


@pytest.fixture
def fake_provider(monkeypatch):
    """Route provider creation to a FakeCompletion."""
    provider = FakeCompletion('["Оке", "Окой", "Окою"]')

    class Registry:
        def create_completion(self, name, params):
            provider.params = params
            return provider

    monkeypatch.setattr("aliasgen.api.get_registry", lambda: Registry())
    return provider


class TestAdd:
    def test_writes_aliases(self, config_dir, note_path, fake_provider):
        note = note_path / "Ока.md"
        note.write_text("Река.\n", encoding="utf-8")

        result = runner.invoke(app, ["--config-dir", str(config_dir), "add", str(note)])

        assert result.exit_code == 0, result.output
        assert "Aliases updated" in result.output
        assert note.read_text(encoding="utf-8") == (
            "---\naliases:\n- Оке\n- Окой\n- Окою\n---\nРека.\n"
        )
        assert fake_provider.params["api_key"] == "sk-test"

    def test_merges_with_existing(self, config_dir, note_path, fake_provider):
        fake_provider.reply = "Лесной, лесок, лесная зона"
        note = note_path / "Лес.md"
        note.write_text("---\naliases: [Лесок]\n---\nЛес.\n", encoding="utf-8")

        result = runner.invoke(app, ["--config-dir", str(config_dir), "--json", "add", str(note)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["state"] == "done"
        assert data["aliases"] == ["Лесок", "Лесной", "лесок", "лесная зона"]

    def test_body_option(self, config_dir, note_path, fake_provider):
        note = note_path / "Ока.md"
        note.write_text("---\ntags: river\n---\nОка впадает в Волгу.\n", encoding="utf-8")

        result = runner.invoke(app, [
            "--config-dir", str(config_dir), "add", str(note), "--body", "-t", "0.2",
        ])

        assert result.exit_code == 0, result.output
        prompt, temperature = fake_provider.calls[0]
        assert prompt.excerpt == "Ока впадает в Волгу.\n"
        assert temperature == 0.2

    def test_missing_key(self, tmp_path, note_path, fake_provider):
        note = note_path / "Ока.md"
        note.write_text("Река.\n", encoding="utf-8")

        result = runner.invoke(app, ["--config-dir", str(tmp_path / "empty"), "add", str(note)])

        assert result.exit_code == 1
        assert "API key" in result.output
        assert fake_provider.calls == []
        assert note.read_text(encoding="utf-8") == "Река.\n"

    def test_missing_file(self, config_dir, note_path, fake_provider):
        result = runner.invoke(app, [
            "--config-dir", str(config_dir), "add", str(note_path / "nope.md"),
        ])

        assert result.exit_code == 1
        assert "No active document" in result.output

    def test_writes_ops_log(self, config_dir, note_path, fake_provider):
        note = note_path / "Ока.md"
        note.write_text("Река.\n", encoding="utf-8")

        runner.invoke(app, ["--config-dir", str(config_dir), "add", str(note)])

        assert "Updated aliases" in (config_dir / "aliasgen-ops.log").read_text(encoding="utf-8")

    def test_closes_provider(self, config_dir, note_path, fake_provider):
        note = note_path / "Ока.md"
        note.write_text("Река.\n", encoding="utf-8")

        runner.invoke(app, ["--config-dir", str(config_dir), "add", str(note)])

        assert fake_provider.closed


class TestMain:
    def test_unexpected_error_logged_in_config_dir(self, tmp_path, note_path, monkeypatch):
        config_dir = tmp_path / "chosen"
        note = note_path / "Ока.md"
        note.write_text("Река.\n", encoding="utf-8")

        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("aliasgen.cli.AliasExtractor", explode)
        monkeypatch.setattr(sys, "argv", ["aliasgen", "--config-dir", str(config_dir), "add", str(note)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        log = (config_dir / "aliasgen-errors.log").read_text()
        assert "RuntimeError: boom" in log


class TestConfig:
    def test_show_masks_key(self, config_dir):
        result = runner.invoke(app, ["--config-dir", str(config_dir), "config"])

        assert result.exit_code == 0, result.output
        assert "sk-test" not in result.output
        assert "max_body_chars: 2000" in result.output

    def test_set_values(self, tmp_path):
        config_dir = tmp_path / "cfg"

        result = runner.invoke(app, [
            "--config-dir", str(config_dir), "config",
            "--api-key", "  sk-new-key-1234  ", "--max-body-chars", "500",
        ])

        assert result.exit_code == 0, result.output
        config = load_config(config_dir)
        assert config.api_key == "sk-new-key-1234"
        assert config.max_body_chars == 500

    def test_rejects_non_positive_length(self, tmp_path):
        result = runner.invoke(app, [
            "--config-dir", str(tmp_path / "cfg"), "config", "--max-body-chars", "0",
        ])
        assert result.exit_code != 0

    def test_invalid_file_reported(self, tmp_path):
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "aliasgen.toml").write_text("[prompt]\nmax_body_chars = -1\n")

        result = runner.invoke(app, ["--config-dir", str(config_dir), "config"])

        assert result.exit_code == 1
        assert "invalid configuration" in result.output
