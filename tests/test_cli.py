import pytest
import yaml
from click.testing import CliRunner

from dbseed import __version__
from dbseed.cli import main


MODULE = '''
from dbseed import binder_configuration, operation, resource
from dbseed.engine import DefaultBinderConfiguration, sql


class Seeds:
    @resource("db")
    def db(self):
        return None

    @resource("aux")
    def aux(self):
        return None

    binder = binder_configuration("aux")(DefaultBinderConfiguration.INSTANCE)

    second_2 = operation("db")(sql("2"))
    first_1 = operation("db", "aux")(sql("1"))

    class Nested:
        third_3 = operation("db")(sql("3"))


class Broken:
    op_1 = operation("db")(sql("1"))
'''


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def seeds_file(tmp_path, monkeypatch):
    path = tmp_path / "seed_targets.py"
    path.write_text(MODULE)
    monkeypatch.chdir(tmp_path)
    return path


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_inspect_file_target(runner, seeds_file):
    result = runner.invoke(main, ["inspect", f"{seeds_file}::Seeds"])
    assert result.exit_code == 0, result.output
    assert "db" in result.output
    assert "aux" in result.output
    assert "first_1" in result.output
    assert "default" in result.output


def test_inspect_nested_target(runner, seeds_file):
    result = runner.invoke(main, ["inspect", f"{seeds_file}::Seeds::Nested"])
    assert result.exit_code == 0, result.output
    assert "third_3" in result.output


def test_inspect_module_target(runner, seeds_file, monkeypatch):
    monkeypatch.syspath_prepend(str(seeds_file.parent))
    result = runner.invoke(main, ["inspect", "seed_targets:Seeds"])
    assert result.exit_code == 0, result.output
    assert "second_2" in result.output


def test_inspect_configuration_error(runner, seeds_file):
    result = runner.invoke(main, ["inspect", f"{seeds_file}::Broken"])
    assert result.exit_code == 1
    assert "No @resource found" in result.output


def test_inspect_bad_target(runner, seeds_file):
    result = runner.invoke(main, ["inspect", "not-a-target"])
    assert result.exit_code == 1
    assert "Expected" in result.output


def test_inspect_missing_class(runner, seeds_file):
    result = runner.invoke(main, ["inspect", f"{seeds_file}::Nope"])
    assert result.exit_code == 1
    assert "Nope not found" in result.output


def test_invalid_config_file(runner, seeds_file, tmp_path):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(yaml.dump({"lifecycle": "forever"}))
    result = runner.invoke(main, ["--config", str(config_path), "inspect", f"{seeds_file}::Seeds"])
    assert result.exit_code == 1
    assert "lifecycle" in result.output


def test_lifecycle_shown_in_title(runner, seeds_file, tmp_path):
    config_path = tmp_path / "dbseed.yaml"
    config_path.write_text(yaml.dump({"lifecycle": "per_instance"}))
    result = runner.invoke(main, ["inspect", f"{seeds_file}::Seeds"])
    assert result.exit_code == 0, result.output
    assert "per_instance" in result.output
