from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from gfx.keys import KEY_LEFT, KEY_UP, KeyAction
from rewind.cli import app, parse_event_spec


def test_demo_command_replays_default_scenario(monkeypatch) -> None:
    monkeypatch.delenv("REWIND_DEBUG", raising=False)
    result = CliRunner().invoke(app, ["demo", "--json"])

    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    assert report["identical"] is True
    assert report["recording"]["ticks"] == 3
    assert report["playback"]["ticks"] == 3
    assert report["events_delivered"] == 1
    x, y, z = report["playback"]["final_position"]
    assert (x, z) == (0.0, 0.0)
    assert y == pytest.approx(0.2)


def test_demo_command_text_output_and_trace(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        app,
        [
            "demo",
            "-e",
            "1:right:press",
            "-e",
            "4:right:release",
            "--close-after",
            "6",
            "--trace",
            "--base-dir",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "replay identical" in result.output
    assert "trace log:" in result.output
    logs = list((tmp_path / "logs").glob("rewind-demo-*.log"))
    assert len(logs) == 1
    assert "event=mode_switch" in logs[0].read_text(encoding="utf-8")


def test_demo_command_max_ticks_caps_recording(monkeypatch) -> None:
    monkeypatch.delenv("REWIND_DEBUG", raising=False)
    result = CliRunner().invoke(app, ["demo", "--close-after", "50", "--max-ticks", "7", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["recording"]["ticks"] == 7


def test_demo_command_rejects_negative_max_ticks() -> None:
    result = CliRunner().invoke(app, ["demo", "--max-ticks", "-1"])
    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    assert "max-ticks must be non-negative" in result.output


def test_demo_command_rejects_bad_event() -> None:
    result = CliRunner().invoke(app, ["demo", "-e", "2:jump"])
    assert result.exit_code == 1
    assert "unknown key" in result.output


def test_demo_command_rejects_two_events_on_one_tick() -> None:
    result = CliRunner().invoke(app, ["demo", "-e", "2:up", "-e", "2:left"])
    assert result.exit_code == 1
    assert "one event per poll" in result.output


def test_parse_event_spec() -> None:
    assert parse_event_spec("2:up:press") == (1, parse_event_spec("2:Up")[1])
    poll_index, event = parse_event_spec("3:left:repeat:0x1")
    assert poll_index == 2
    assert (event.key, event.action, event.mods) == (KEY_LEFT, KeyAction.REPEAT, 1)
    assert parse_event_spec("1:up")[1].key == KEY_UP
    with pytest.raises(ValueError, match=">= 1"):
        parse_event_spec("0:up")
    with pytest.raises(ValueError, match="unknown key action"):
        parse_event_spec("1:up:hold")


def test_run_command_wires_window_platform(monkeypatch, tmp_path: Path) -> None:
    captured: dict[str, object] = {}

    class _FakeWindow:
        def __init__(self, **kwargs) -> None:  # noqa: ANN003
            captured["window"] = kwargs
            self.width = kwargs["width"]
            self.height = kwargs["height"]

        def __enter__(self):  # noqa: ANN204
            return self

        def __exit__(self, *exc) -> None:  # noqa: ANN002
            captured["closed"] = True

        def modifiers(self) -> int:
            return 0

        def harvest_key_events(self):  # noqa: ANN201
            return [(KEY_UP, KeyAction.PRESS)]

        def should_close(self) -> bool:
            return False

        def present(self, draw=None) -> None:  # noqa: ANN001
            pass

    monkeypatch.setattr("gfx.app.RaylibWindow", _FakeWindow)
    result = CliRunner().invoke(
        app,
        ["run", "--max-ticks", "4", "--fps", "1000", "--width", "320", "--height", "200", "--base-dir", str(tmp_path)],
    )

    assert result.exit_code == 0, result.output
    assert "replay identical" in result.output
    assert captured["window"] == {"width": 320, "height": 200, "title": "Input Recorder/Playback", "fps": 1000}
    assert captured["closed"] is True
