"""End-to-end tests for `canvelete watch` and `canvelete watch-dir`.

The container's change source replays `change_events` and then interrupts
the session the way Ctrl+C does.
"""

import json
from pathlib import Path

import httpx
import pytest

RENDER = "/api/automation/render"


@pytest.fixture
def echo_render(fake_api):
    """Render answers with the dynamic data it was sent."""

    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(200, content=json.dumps(body.get("dynamicData")).encode())

    fake_api.on("POST", RENDER, handler=handler)
    return fake_api


def test_watch_renders_initially_and_stops_cleanly(invoke, echo_render):
    Path("data.json").write_text('{"title": "Launch"}', encoding="utf-8")

    result = invoke("watch", "data.json", "-d", "d1", "-o", "out/poster-{{count}}.png")

    assert result.exit_code == 0, result.output
    assert json.loads(Path("out/poster-1.png").read_text(encoding="utf-8")) == {"title": "Launch"}
    assert echo_render.body("POST", RENDER) == {
        "format": "png",
        "quality": 90,
        "designId": "d1",
        "dynamicData": {"title": "Launch"},
    }
    assert "Watch Mode" in result.stderr
    assert "Saved to out/poster-1.png" in result.stderr
    assert "Stopping watch mode..." in result.stderr


def test_watch_reports_invalid_data_and_keeps_running(invoke, echo_render):
    Path("data.json").write_text("{oops", encoding="utf-8")

    result = invoke("watch", "data.json", "-d", "d1")

    assert result.exit_code == 0
    assert "Render failed: Invalid JSON in data.json" in result.stderr
    assert not echo_render.requests
    assert "Stopping watch mode..." in result.stderr


def test_watch_requires_a_target(invoke, fake_api):
    Path("data.json").write_text("{}", encoding="utf-8")

    result = invoke("watch", "data.json")

    assert result.exit_code == 1
    assert "Either a design id or a template id is required" in result.stderr
    assert not fake_api.requests


def test_watch_dir_processes_each_file_once(invoke, echo_render, change_events):
    inbox = Path("inbox")
    inbox.mkdir()
    (inbox / "alice.json").write_text('{"name": "Alice"}', encoding="utf-8")
    (inbox / "notes.txt").write_text("ignored", encoding="utf-8")
    change_events.extend([inbox / "alice.json", inbox / "notes.txt"])

    result = invoke("watch-dir", "inbox", "-t", "tpl-1", "-o", "out", "-f", "jpg")

    assert result.exit_code == 0, result.output
    assert json.loads(Path("out/alice.jpg").read_text(encoding="utf-8")) == {"name": "Alice"}
    assert len(echo_render.requests) == 1
    assert echo_render.body("POST", RENDER)["templateId"] == "tpl-1"
    assert "alice.json -> alice.jpg" in result.stderr
    assert "Stopping watch mode..." in result.stderr


def test_watch_dir_delete_after(invoke, echo_render):
    Path("inbox").mkdir()
    Path("inbox/bob.json").write_text('{"name": "Bob"}', encoding="utf-8")

    result = invoke("watch-dir", "inbox", "-d", "d1", "--delete-after")

    assert result.exit_code == 0, result.output
    assert Path("output/bob.png").exists()
    assert not Path("inbox/bob.json").exists()
    assert "Deleted bob.json" in result.stderr


def test_watch_dir_reports_render_failures(invoke, fake_api):
    fake_api.on("POST", RENDER, {"error": "Design not found"}, status=404)
    Path("inbox").mkdir()
    Path("inbox/carol.json").write_text("{}", encoding="utf-8")

    result = invoke("watch-dir", "inbox", "-d", "missing")

    assert result.exit_code == 0
    assert "carol.json: Design not found" in result.stderr
    assert Path("inbox/carol.json").exists()
