"""End-to-end tests for `canvelete canvas`."""

import json
from pathlib import Path

import pytest

DESIGN = "/api/automation/designs/d1"
CANVAS = "/api/designs/d1/canvas"

ELEMENTS = [
    {"id": "el-1234567890", "type": "text", "x": 10, "y": 20, "width": 300, "height": 40,
     "text": "Hello world", "fill": "#000000"},
    {"id": "el-abcdefghij", "type": "rectangle", "x": 0, "y": 0, "width": 1080, "height": 1080},
]


@pytest.fixture
def design_api(fake_api):
    fake_api.on(
        "GET",
        DESIGN,
        {"data": {"id": "d1", "width": 1080, "height": 1080, "canvasData": {"elements": ELEMENTS}}},
    )
    fake_api.on("PATCH", DESIGN, {"data": {"id": "d1"}})
    return fake_api


def test_elements_listing(invoke, fake_api):
    fake_api.on("GET", CANVAS, {"data": {"elements": ELEMENTS}})

    result = invoke("canvas", "elements", "d1")

    assert result.exit_code == 0, result.output
    assert "Canvas Elements (2)" in result.stdout
    assert " 1. text (el-12345)" in result.stdout
    assert 'Text: "Hello world"' in result.stdout
    assert "Size: 1080x1080" in result.stdout


def test_elements_empty(invoke, fake_api):
    fake_api.on("GET", CANVAS, {"elements": []})

    result = invoke("canvas", "elements", "d1")

    assert result.exit_code == 0
    assert "No elements found on canvas." in result.stderr


def test_add_builds_element(invoke, fake_api):
    fake_api.on("POST", "/api/designs/d1/elements", {"data": {"id": "el-new"}})

    result = invoke(
        "canvas", "add", "d1", "-t", "text", "-x", "5", "-y", "6", "--text", "Sale", "--fill", "red"
    )

    assert result.exit_code == 0, result.output
    assert fake_api.body("POST", "/api/designs/d1/elements") == {
        "element": {
            "type": "text", "x": 5, "y": 6, "width": 100, "height": 100, "fill": "red", "text": "Sale",
        }
    }
    assert "Element ID: el-new" in result.stderr


def test_add_from_file(invoke, fake_api):
    fake_api.on("POST", "/api/designs/d1/elements", {"data": {}})
    Path("el.json").write_text('{"type": "circle", "radius": 4}', encoding="utf-8")

    result = invoke("canvas", "add", "d1", "--from-file", "el.json")

    assert result.exit_code == 0
    assert fake_api.body("POST", "/api/designs/d1/elements") == {
        "element": {"type": "circle", "radius": 4}
    }


def test_add_requires_type(invoke, fake_api):
    result = invoke("canvas", "add", "d1")

    assert result.exit_code == 1
    assert "Element type is required" in result.stderr
    assert not fake_api.requests


def test_clear_with_force(invoke, fake_api):
    fake_api.on("DELETE", "/api/designs/d1/canvas/elements", {"success": True})

    result = invoke("canvas", "clear", "d1", "-f")

    assert result.exit_code == 0
    assert "Canvas cleared" in result.stderr
    assert len(fake_api.calls("DELETE", "/api/designs/d1/canvas/elements")) == 1


def test_clear_declined_sends_nothing(invoke, fake_api):
    result = invoke("canvas", "clear", "d1", input="n\n")

    assert result.exit_code == 1
    assert not fake_api.requests


@pytest.mark.parametrize(
    ("args", "size"),
    [(["--preset", "HD"], [1920, 1080]), (["-w", "800", "-H", "600"], [800, 600])],
)
def test_resize(invoke, fake_api, args, size):
    fake_api.on("PATCH", "/api/designs/d1/canvas/resize", {"success": True})

    result = invoke("canvas", "resize", "d1", *args)

    assert result.exit_code == 0, result.output
    body = fake_api.body("PATCH", "/api/designs/d1/canvas/resize")
    assert [body["width"], body["height"]] == size
    assert f"Canvas resized to {size[0]}x{size[1]}" in result.stderr


@pytest.mark.parametrize(
    ("args", "message"),
    [(["--preset", "billboard"], "Preset 'billboard' not found"), (["-w", "800"], "--preset")],
)
def test_resize_rejects(invoke, fake_api, args, message):
    result = invoke("canvas", "resize", "d1", *args)

    assert result.exit_code == 1
    assert message in result.stderr
    assert not fake_api.requests


def test_export_writes_document(invoke, design_api):
    result = invoke("canvas", "export", "d1")

    assert result.exit_code == 0, result.output
    document = json.loads(Path("canvas.json").read_text(encoding="utf-8"))
    assert document["sourceDesignId"] == "d1"
    assert (document["width"], document["height"]) == (1080, 1080)
    assert document["elements"] == ELEMENTS
    assert "Elements: 2" in result.stderr


def test_import_replaces_elements(invoke, design_api):
    Path("c.json").write_text(json.dumps({"elements": [{"type": "circle"}]}), encoding="utf-8")

    result = invoke("canvas", "import", "d1", "c.json")

    assert result.exit_code == 0, result.output
    assert design_api.body("PATCH", DESIGN) == {"canvasData": {"elements": [{"type": "circle"}]}}
    assert not design_api.calls("GET", DESIGN)


def test_import_merge_appends(invoke, design_api):
    Path("c.json").write_text(json.dumps({"elements": [{"type": "circle"}]}), encoding="utf-8")

    result = invoke("canvas", "import", "d1", "c.json", "--merge")

    assert result.exit_code == 0, result.output
    elements = design_api.body("PATCH", DESIGN)["canvasData"]["elements"]
    assert elements == [*ELEMENTS, {"type": "circle"}]
    assert "Elements: 3" in result.stderr


def test_export_then_import_round_trip(invoke, design_api):
    invoke("canvas", "export", "d1", "-o", "snap.json")

    invoke("canvas", "import", "d1", "snap.json")

    assert design_api.body("PATCH", DESIGN)["canvasData"]["elements"] == ELEMENTS
