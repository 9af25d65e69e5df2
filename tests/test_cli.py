"""
Tests for CLI commands — config show/check, features, render, global options.
"""

import json
import logging
import textwrap
from pathlib import Path

from click.testing import CliRunner

from confdeploy.main import cli


class TestCLIGlobal:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "dependency order" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestConfigCommands:
    def _make_settings(self, tmp_path: Path, content: str = "") -> Path:
        path = tmp_path / "confdeploy.yml"
        path.write_text(textwrap.dedent(content or """\
            dry_run: true
            continue_on_error: true
            features:
              automation_resources: true
        """))
        return path

    def test_show(self, tmp_path: Path):
        path = self._make_settings(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "show"])
        assert result.exit_code == 0
        assert "dry run:           True" in result.output

    def test_show_json(self, tmp_path: Path):
        path = self._make_settings(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "show", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["dry_run"] is True
        assert data["features"] == {"automation_resources": True}

    def test_log_level_from_settings_file(self, tmp_path: Path):
        path = self._make_settings(tmp_path, "log_level: DEBUG\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "show"])
        assert result.exit_code == 0
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_beats_settings_file_log_level(self, tmp_path: Path):
        path = self._make_settings(tmp_path, "log_level: DEBUG\n")
        result = CliRunner().invoke(cli, ["--quiet", "--config", str(path), "config", "show"])
        assert result.exit_code == 0
        assert logging.getLogger().level == logging.ERROR

    def test_show_missing_file(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "nope.yml"), "config", "show"])
        assert result.exit_code == 1

    def test_check_valid(self, tmp_path: Path):
        path = self._make_settings(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_check_invalid_json(self, tmp_path: Path):
        path = self._make_settings(tmp_path, "features:\n  teleport: true\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert "teleport" in data["errors"][0]

    def test_features(self, tmp_path: Path):
        path = self._make_settings(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(path), "features"])
        assert result.exit_code == 0
        assert "✓ automation_resources" in result.output


class TestRenderCommand:
    def _template(self, tmp_path: Path, content: str) -> Path:
        path = tmp_path / "dashboard.json"
        path.write_text(content)
        return path

    def test_render(self, tmp_path: Path):
        path = self._template(tmp_path, '{"name": "{{ .name }}"}')
        result = CliRunner().invoke(cli, ["render", str(path), "-p", "name=Overview"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"name": "Overview"}

    def test_values_escaped_by_default(self, tmp_path: Path):
        path = self._template(tmp_path, '{"name": "{{ .name }}"}')
        result = CliRunner().invoke(cli, ["render", str(path), "-p", 'name=say "hi"'])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"name": 'say "hi"'}

    def test_value_with_equal_signs(self, tmp_path: Path):
        path = self._template(tmp_path, '{"q": "{{ .q }}"}')
        result = CliRunner().invoke(cli, ["render", str(path), "-p", "q=a=b=c"])
        assert json.loads(result.output) == {"q": "a=b=c"}

    def test_raw_breaks_json(self, tmp_path: Path):
        path = self._template(tmp_path, '{"name": "{{ .name }}"}')
        result = CliRunner().invoke(cli, ["render", str(path), "--raw", "-p", 'name=say "hi"'])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_raw_without_validation(self, tmp_path: Path):
        path = self._template(tmp_path, "Follow the {{ color }}")
        result = CliRunner().invoke(cli, ["render", str(path), "--raw", "--no-validate", "-p", "color=white"])
        assert result.exit_code == 0
        assert result.output.strip() == "Follow the white"

    def test_environment_placeholder(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("ANIMAL", "cow")
        path = self._template(tmp_path, '{"animal": "{{ .Env.ANIMAL }}"}')
        result = CliRunner().invoke(cli, ["render", str(path)])
        assert json.loads(result.output) == {"animal": "cow"}

    def test_missing_property(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("name", raising=False)
        path = self._template(tmp_path, '{"name": "{{ .name }}"}')
        result = CliRunner().invoke(cli, ["render", str(path)])
        assert result.exit_code == 1
        assert 'no entry for key "name"' in result.output

    def test_bad_property_syntax(self, tmp_path: Path):
        path = self._template(tmp_path, "{}")
        result = CliRunner().invoke(cli, ["render", str(path), "-p", "novalue"])
        assert result.exit_code == 2
