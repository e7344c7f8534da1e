import pathlib

import pytest
from typer.testing import CliRunner

from inipp.cli import app

runner = CliRunner()

TEST_INI = """[DEFAULT]
host=example.com
[server]
url=http://%(host)/
port = 8080
debug = true
oops
"""


@pytest.fixture
def ini_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "test.ini"
    path.write_text(TEST_INI, encoding="utf-8")
    return path


def test_check(ini_file: pathlib.Path):
    result = runner.invoke(app, ["check", str(ini_file)])

    assert result.exit_code == 1
    assert "oops" in result.output


def test_check_valid(tmp_path: pathlib.Path):
    path = tmp_path / "ok.ini"
    path.write_text("[a]\nx=1\n", encoding="utf-8")

    result = runner.invoke(app, ["check", str(path), "--encoding", "utf-8"])

    assert result.exit_code == 0
    assert result.output == ""


def test_format(ini_file: pathlib.Path):
    result = runner.invoke(app, ["format", str(ini_file), "--interpolate"])

    assert result.exit_code == 0
    assert result.output == (
        "[DEFAULT]\n"
        "host=example.com\n"
        "[server]\n"
        "debug=true\n"
        "port=8080\n"
        "url=http://example.com/\n"
    )


def test_format_output(ini_file: pathlib.Path, tmp_path: pathlib.Path):
    out = tmp_path / "out.ini"
    result = runner.invoke(app, ["format", str(ini_file), "-o", str(out)])

    assert result.exit_code == 0
    assert "url=http://%(host)/\n" in out.read_text(encoding="utf-8")


def test_show(ini_file: pathlib.Path):
    result = runner.invoke(app, ["show", str(ini_file), "--section", "server"])

    assert result.exit_code == 0
    assert "8080" in result.output
    assert "example.com" not in result.output


def test_get(ini_file: pathlib.Path):
    result = runner.invoke(app, ["get", str(ini_file), "server", "port", "--type", "int"])

    assert result.exit_code == 0
    assert result.output == "8080\n"


def test_get_bool(ini_file: pathlib.Path):
    result = runner.invoke(app, ["get", str(ini_file), "server", "debug", "-t", "bool"])

    assert result.exit_code == 0
    assert result.output == "true\n"


def test_get_interpolated(ini_file: pathlib.Path):
    result = runner.invoke(app, ["get", str(ini_file), "server", "url", "--interpolate"])

    assert result.output == "http://example.com/\n"


def test_get_invalid(ini_file: pathlib.Path):
    result = runner.invoke(app, ["get", str(ini_file), "server", "debug", "-t", "int"])

    assert result.exit_code == 1


def test_get_missing(ini_file: pathlib.Path):
    result = runner.invoke(app, ["get", str(ini_file), "server", "nope"])

    assert result.exit_code == 1
