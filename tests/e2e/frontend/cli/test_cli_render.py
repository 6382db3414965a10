"""End-to-end tests for `canvelete render`, `renders` and `quick-render`."""

import json
from pathlib import Path

import httpx
import pytest

RENDER = "/api/automation/render"
ASYNC = "/api/v1/render/async"
PNG = b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture
def render_api(fake_api):
    fake_api.on("POST", RENDER, content=PNG)
    return fake_api


def test_render_writes_output_file(invoke, render_api):
    result = invoke("render", "-d", "design-1", "-o", "out/poster.png", "-f", "png", "-q", "80")

    assert result.exit_code == 0, result.output
    assert Path("out/poster.png").read_bytes() == PNG
    assert render_api.body("POST", RENDER) == {"format": "png", "quality": 80, "designId": "design-1"}
    assert "Rendered successfully!" in result.stderr


def test_render_uses_configured_defaults(invoke, app, render_api):
    app.config_store.set("default_format", "jpg")
    app.config_store.set("default_quality", 60)

    result = invoke("render", "-t", "template-1", "--json")

    assert result.exit_code == 0, result.output
    body = render_api.body("POST", RENDER)
    assert (body["format"], body["quality"], body["templateId"]) == ("jpg", 60, "template-1")
    report = json.loads(result.stdout)
    assert report["format"] == "jpg"
    assert report["size"] == len(PNG)
    assert re_default_name(report["output"], "template", "jpg")


def re_default_name(name, prefix, fmt):
    stem, _, suffix = name.partition(".")
    head, _, stamp = stem.partition("_")
    return head == prefix and stamp.isdigit() and suffix == fmt


def test_render_sends_dynamic_data_and_size(invoke, render_api):
    Path("data.json").write_text('{"title": "Hello"}', encoding="utf-8")

    result = invoke(
        "render", "-d", "d1", "-o", "a.png", "--data-file", "data.json", "-w", "640", "-H", "480"
    )

    assert result.exit_code == 0, result.output
    body = render_api.body("POST", RENDER)
    assert body["dynamicData"] == {"title": "Hello"}
    assert (body["width"], body["height"]) == (640, 480)


def test_render_stdout_is_pure_binary(invoke, render_api):
    result = invoke("render", "-d", "d1", "--stdout")

    assert result.exit_code == 0
    assert result.stdout_bytes == PNG


@pytest.mark.parametrize(
    ("args", "message"),
    [
        ([], "Either a design id or a template id is required"),
        (["-d", "d1", "-t", "t1"], "not both"),
        (["-d", "d1", "--data", "{broken"], "Invalid JSON in --data"),
    ],
)
def test_invalid_render_requests_send_nothing(invoke, render_api, args, message):
    result = invoke("render", *args)

    assert result.exit_code == 1
    assert message in result.stderr
    assert not render_api.requests


def test_render_server_error(invoke, fake_api):
    fake_api.on("POST", RENDER, {"error": "Template has no canvas"}, status=422)

    result = invoke("render", "-d", "d1", "-o", "x.png")

    assert result.exit_code == 1
    assert "Template has no canvas" in result.stderr
    assert not Path("x.png").exists()


def test_async_render_prints_job_id(invoke, fake_api):
    fake_api.on("POST", ASYNC, {"data": {"jobId": "job-42", "status": "pending", "estimatedTime": 3}})

    result = invoke("render", "-d", "d1", "--async")

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "job-42"
    assert fake_api.body("POST", ASYNC)["async"] is True
    assert "canvelete renders status job-42" in result.stderr


def test_status_once(invoke, fake_api):
    fake_api.on("GET", "/api/v1/render/status/job-42", {"data": {"jobId": "job-42", "status": "processing"}})

    result = invoke("renders", "status", "job-42", "--json")

    assert json.loads(result.stdout)["status"] == "processing"


def scripted_status(fake_api, *documents):
    remaining = list(documents)

    def handler(request):
        document = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        return httpx.Response(200, json={"data": document})

    fake_api.on("GET", "/api/v1/render/status/job-42", handler=handler)


def test_status_wait_until_completed(invoke, fake_api):
    scripted_status(
        fake_api,
        {"jobId": "job-42", "status": "pending"},
        {"jobId": "job-42", "status": "completed", "outputUrl": "https://cdn.test/out.png"},
    )

    result = invoke("renders", "status", "job-42", "--wait", "--interval", "1")

    assert result.exit_code == 0, result.output
    assert len(fake_api.requests) == 2
    assert "https://cdn.test/out.png" in result.stderr


def test_status_wait_on_failed_job_exits_1(invoke, fake_api):
    scripted_status(fake_api, {"jobId": "job-42", "status": "failed", "error": "Out of credits"})

    result = invoke("renders", "status", "job-42", "--wait", "--interval", "1")

    assert result.exit_code == 1
    assert "Render failed: Out of credits" in result.stderr


def test_status_wait_times_out(invoke, fake_api):
    scripted_status(fake_api, {"jobId": "job-42", "status": "processing"})

    result = invoke("renders", "status", "job-42", "--wait", "--timeout", "1", "--interval", "400")

    assert result.exit_code == 1
    assert "did not finish within 1s" in result.stderr
    assert "last status: processing" in result.stderr


def test_renders_list(invoke, fake_api):
    fake_api.on(
        "GET",
        RENDER,
        {"data": [{"id": "r1", "designId": "d1", "format": "png", "status": "completed", "fileSize": 2048}]},
    )

    result = invoke("renders", "list")

    assert result.exit_code == 0
    assert "PNG" in result.stdout
    assert "2 KB" in result.stdout


def test_quick_render_defaults(invoke, render_api):
    result = invoke("quick-render", "abcdefghijkl")

    assert result.exit_code == 0, result.output
    assert Path("abcdefgh.png").read_bytes() == PNG
    assert render_api.body("POST", RENDER) == {"format": "png", "quality": 90, "designId": "abcdefghijkl"}
