from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from propshape import cli
from propshape.common import SourceFetchError


def _invoke(args: list[str], *, input_text: str | None = None):
    return CliRunner().invoke(cli.app, args, input=input_text)


def test_help_lists_commands() -> None:
    result = _invoke(["--help"])
    assert result.exit_code == 0
    assert "propType" in result.output
    assert "serve" in result.output


def test_prop_type_with_options(output_dir: Path) -> None:
    result = _invoke(
        ["propType", "--name", "User", "--data", '{"b": 1, "a": [1, "x"]}', "--output-dir", str(output_dir)]
    )
    assert result.exit_code == 0, result.output
    assert str(output_dir / "User.js") in result.output
    assert (output_dir / "User.js").read_text(encoding="utf-8") == (
        "import PropType from 'prop-types'\n"
        "\n"
        "const User = PropType.shape({\n"
        "  b: PropType.number,\n"
        "  a: PropType.arrayOf(\n"
        "    PropType.oneOfType([\n"
        "      PropType.number,\n"
        "      PropType.string\n"
        "    ])\n"
        "  ),\n"
        "})\n"
        "\n"
        "export default User\n"
    )


def test_prop_type_prompts_for_json(output_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli.click, "edit", lambda text, extension=None: '[{"a": 1}, {"b": true}]')
    result = _invoke(["propType", "--output-dir", str(output_dir)], input_text="Records\nJSON\n")
    assert result.exit_code == 0, result.output
    content = (output_dir / "Records.js").read_text(encoding="utf-8")
    assert "const Records = PropType.arrayOf(" in content
    assert "    a: PropType.number,\n    b: PropType.bool,\n" in content


def test_prop_type_reopens_editor_until_valid(output_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    edits = iter(['{"a": ', '{"a": "x"}'])
    monkeypatch.setattr(cli.click, "edit", lambda text, extension=None: next(edits))
    result = _invoke(["propType", "--output-dir", str(output_dir)], input_text="Thing\nJSON\ny\n")
    assert result.exit_code == 0, result.output
    assert "Please enter a valid JSON string" in result.output
    assert "a: PropType.string," in (output_dir / "Thing.js").read_text(encoding="utf-8")


def test_prop_type_gives_up_when_editing_declined(output_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli.click, "edit", lambda text, extension=None: None)
    result = _invoke(["propType", "--output-dir", str(output_dir)], input_text="Thing\nJSON\nn\n")
    assert result.exit_code == 1
    assert not output_dir.exists()


def test_prop_type_prompts_for_url(output_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    fetched = []

    def _fetch_json(url, timeout=None):
        fetched.append((url, timeout))
        return {"results": [{"id": 1}, {"id": 2, "name": "x"}]}

    monkeypatch.setattr(cli, "fetch_json", _fetch_json)
    result = _invoke(
        ["propType", "--output-dir", str(output_dir), "--query", ".results"],
        input_text="Results\nURL\nhttps://example.com/api\n",
    )
    assert result.exit_code == 0, result.output
    assert fetched == [("https://example.com/api", None)]
    content = (output_dir / "Results.js").read_text(encoding="utf-8")
    assert "const Results = PropType.arrayOf(" in content
    assert "id: PropType.number," in content
    assert "name: PropType.string," in content


def test_prop_type_source_is_case_insensitive(output_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "fetch_json", lambda url, timeout=None: [1])
    result = _invoke(
        ["propType", "--name", "Numbers", "--source", "url", "--url", "https://example.com", "--output-dir", str(output_dir)]
    )
    assert result.exit_code == 0, result.output
    assert (output_dir / "Numbers.js").is_file()


def test_prop_type_uses_configured_timeout_and_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "propshape.yaml").write_text("output_dir: generated\ntimeout: 3\n", encoding="utf-8")
    fetched = []
    monkeypatch.setattr(cli, "fetch_json", lambda url, timeout=None: fetched.append(timeout) or {"a": 1})
    result = _invoke(["propType", "--name", "A", "--url", "https://example.com"])
    assert result.exit_code == 0, result.output
    assert fetched == [3]
    assert (tmp_path / "generated" / "A.js").is_file()


def test_prop_type_invalid_json_writes_nothing(output_dir: Path) -> None:
    result = _invoke(["propType", "--name", "Bad", "--data", "{nope", "--output-dir", str(output_dir)])
    assert result.exit_code == 1
    assert not output_dir.exists()


def test_prop_type_fetch_failure_writes_nothing(output_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(url, timeout=None):
        raise SourceFetchError("Connection error: refused")

    monkeypatch.setattr(cli, "fetch_json", _fail)
    result = _invoke(["propType", "--name", "Bad", "--url", "https://example.com", "--output-dir", str(output_dir)])
    assert result.exit_code == 1
    assert not output_dir.exists()


def test_prop_type_rejects_unknown_source(output_dir: Path) -> None:
    result = _invoke(["propType", "--name", "Bad", "--source", "XML", "--output-dir", str(output_dir)])
    assert result.exit_code == 2
    assert not output_dir.exists()


def test_prop_type_invalid_config(tmp_path: Path, output_dir: Path) -> None:
    (tmp_path / "propshape.yaml").write_text("log_level: LOUD\n", encoding="utf-8")
    result = _invoke(["propType", "--name", "A", "--data", "[]", "--output-dir", str(output_dir)])
    assert result.exit_code == 1
    assert not output_dir.exists()


def test_global_options(output_dir: Path) -> None:
    result = _invoke(
        ["--log-level", "debug", "--log-format", "structured", "propType", "--name", "A", "--data", "[]", "--output-dir", str(output_dir)]
    )
    assert result.exit_code == 0, result.output
    assert (output_dir / "A.js").read_text(encoding="utf-8").startswith("import PropType from 'prop-types'\n")


def test_serve_passes_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from propshape import server

    started = {}
    monkeypatch.setattr(server, "start_server", lambda **kwargs: started.update(kwargs))
    result = _invoke(["serve", "--port", "9001"])
    assert result.exit_code == 0, result.output
    assert started["host"] == "127.0.0.1"
    assert started["port"] == 9001
    assert started["settings"].output_dir == "src/propTypes"


def test_prop_type_rejects_path_names(tmp_path: Path, output_dir: Path) -> None:
    result = _invoke(["propType", "--name", "../escaped", "--data", "[1]", "--output-dir", str(output_dir)])
    assert result.exit_code == 1
    assert not (tmp_path / "escaped.js").exists()
    assert not output_dir.exists()


def test_prop_type_missing_template_file(tmp_path: Path, output_dir: Path) -> None:
    (tmp_path / "propshape.yaml").write_text("template: nope.j2\n", encoding="utf-8")
    result = _invoke(["propType", "--name", "A", "--data", "[1]", "--output-dir", str(output_dir)])
    assert result.exit_code == 1
    assert not output_dir.exists()
