"""Tests for the markedtext command line."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from markedtext.scripts import marked_text as cli


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    levels: list[int] = []
    monkeypatch.setattr(cli, "setup_logging", lambda level, **_kwargs: levels.append(level))
    return levels


def _run(args: list[str], settings_path: Path) -> int:
    return cli.main(["--settings", str(settings_path), *args])


def test_parse_prints_text_and_ranges(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = _run(["parse", "--text", "one «ˇtwo» «threeˇ» «ˇfour» fiveˇ six", "--indicate-cursors"], settings_path)

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "text": "one two three four five six",
        "ranges": [[7, 4], [8, 13], [18, 14], [23, 23]],
        "encoding": "utf-32",
    }


def test_parse_reports_utf8_offsets(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = _run(["parse", "--text", "é«x»", "--encoding", "utf-8"], settings_path)

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["ranges"] == [[2, 3]]
    assert payload["encoding"] == "utf-8"


def test_parse_reads_file(settings_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "fixture.txt"
    source.write_text("aˇb", encoding="utf-8")

    assert _run(["parse", "--file", str(source)], settings_path) == 0
    assert json.loads(capsys.readouterr().out)["ranges"] == [[1, 1]]


def test_parse_reads_stdin(
    settings_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("«ab»\n"))

    assert _run(["parse"], settings_path) == 0
    assert json.loads(capsys.readouterr().out) == {"text": "ab", "ranges": [[0, 2]], "encoding": "utf-32"}


def test_parse_error_exits_with_reason(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = _run(["parse", "--text", "«« »"], settings_path)

    assert code == 1
    assert "nested_open" in capsys.readouterr().err


def test_parse_uses_configured_grammar(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings_path.write_text(
        json.dumps({"open_marker": "[", "close_marker": "]", "point_marker": "|", "indicate_cursors": True}),
        encoding="utf-8",
    )

    assert _run(["parse", "--text", "[|ab]"], settings_path) == 0
    assert json.loads(capsys.readouterr().out)["ranges"] == [[2, 0]]


def test_indicate_flag_overrides_settings(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings_path.write_text(json.dumps({"indicate_cursors": True}), encoding="utf-8")

    assert _run(["parse", "--text", "«ab»", "--no-indicate-cursors"], settings_path) == 0
    assert json.loads(capsys.readouterr().out)["ranges"] == [[0, 2]]


def test_points(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["points", "--text", "ˇaˇé", "--encoding", "utf-8"], settings_path) == 0
    assert json.loads(capsys.readouterr().out) == {"text": "aé", "offsets": [0, 1], "encoding": "utf-8"}


def test_points_rejects_ranges(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["points", "--text", "«a»"], settings_path) == 1
    assert "non_degenerate_range" in capsys.readouterr().err


def test_extract(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["extract", "--text", "a|b<c>", "--marker", "|", "--marker", "<"], settings_path) == 0
    assert json.loads(capsys.readouterr().out) == {"text": "abc>", "offsets": {"|": [1], "<": [2]}}


def test_render_json_payload(settings_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    payload = tmp_path / "payload.json"
    payload.write_text(
        json.dumps({"text": "one two", "ranges": [[3, 0], {"start": 4, "end": 7}], "indicate_cursors": True}),
        encoding="utf-8",
    )

    assert _run(["render", "--file", str(payload)], settings_path) == 0
    assert capsys.readouterr().out == "«ˇone» «twoˇ»\n"


def test_render_yaml_payload(settings_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    payload = tmp_path / "payload.yaml"
    payload.write_text("text: héllo\nranges:\n  - [1, 3]\nencoding: utf-8\n", encoding="utf-8")

    assert _run(["render", "--file", str(payload), "--indicate-cursors"], settings_path) == 0
    assert capsys.readouterr().out == "h«éˇ»llo\n"


def test_render_reads_stdin(
    settings_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"text": "ab", "ranges": [[1, 1]]})))

    assert _run(["render"], settings_path) == 0
    assert capsys.readouterr().out == "aˇb\n"


def test_render_rejects_invalid_payload(
    settings_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    payload = tmp_path / "payload.json"
    payload.write_text(json.dumps({"text": 3, "ranges": [[1, -1]]}), encoding="utf-8")

    assert _run(["render", "--file", str(payload)], settings_path) == 1
    err = capsys.readouterr().err
    assert "failed validation" in err
    assert "text" in err


def test_render_rejects_malformed_json(
    settings_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    payload = tmp_path / "payload.json"
    payload.write_text("{", encoding="utf-8")

    assert _run(["render", "--file", str(payload)], settings_path) == 1
    assert "not valid JSON" in capsys.readouterr().err


def test_debug_flag_sets_log_level(settings_path: Path, _no_logging_setup: list[int]) -> None:
    assert _run(["--debug", "points", "--text", "ˇ"], settings_path) == 0
    assert _no_logging_setup == [logging.DEBUG]


def test_invalid_settings_exit_non_zero(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings_path.write_text(json.dumps({"point_marker": "«"}), encoding="utf-8")

    assert _run(["points", "--text", "ˇ"], settings_path) == 1
    assert "invalid settings" in capsys.readouterr().err


def test_missing_subcommand_is_usage_error(settings_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run([], settings_path)

    assert excinfo.value.code == 2


def test_validate_render_payload_collects_messages() -> None:
    with pytest.raises(cli.PayloadValidationError) as excinfo:
        cli.validate_render_payload({"ranges": [[0]], "extra": True})

    messages = excinfo.value.errors
    assert any("'text' is a required property" in message for message in messages)
    assert any("extra" in message for message in messages)
    assert excinfo.value.details()["errors"] == messages


def test_non_string_encoding_setting_exits_non_zero(
    settings_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    settings_path.write_text(json.dumps({"offset_encoding": 8}), encoding="utf-8")

    assert _run(["parse", "--text", "aˇb"], settings_path) == 1
    assert "must be a string" in capsys.readouterr().err


def test_string_boolean_setting_is_honoured(settings_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings_path.write_text(json.dumps({"indicate_cursors": "false"}), encoding="utf-8")

    assert _run(["parse", "--text", "«ab»"], settings_path) == 0
    assert json.loads(capsys.readouterr().out)["ranges"] == [[0, 2]]


def test_file_and_stdin_input_decode_identically(
    settings_path: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    source = tmp_path / "fixture.txt"
    source.write_text("«ab»\n", encoding="utf-8")
    monkeypatch.setattr("sys.stdin", io.StringIO("«ab»\n"))

    assert _run(["parse", "--file", str(source)], settings_path) == 0
    from_file = json.loads(capsys.readouterr().out)
    assert _run(["parse"], settings_path) == 0
    from_stdin = json.loads(capsys.readouterr().out)

    assert from_file == from_stdin == {"text": "ab", "ranges": [[0, 2]], "encoding": "utf-32"}
