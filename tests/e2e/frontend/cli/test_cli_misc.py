"""End-to-end tests for the smaller commands: open, completion, diff, clone,
assets, apikeys, usage and billing."""

import json

import pytest

from canvelete.adapters.config_store import InMemoryConfigStore
from canvelete.adapters.profile_store import InMemoryProfileStore
from canvelete.bootstrap import build_container
from canvelete.entrypoints.cli.main import canvelete

DESIGN_A = {
    "id": "a",
    "name": "Spring Sale",
    "width": 1080,
    "height": 1080,
    "status": "DRAFT",
    "visibility": "PRIVATE",
    "canvasData": {"elements": [{"type": "text"}, {"type": "text"}, {"type": "image"}]},
}
DESIGN_B = {
    **DESIGN_A,
    "id": "b",
    "name": "Summer Sale",
    "width": 1200,
    "canvasData": {"elements": [{"type": "text"}, {"type": "rectangle"}]},
}


@pytest.fixture
def two_designs(fake_api):
    fake_api.on("GET", "/api/automation/designs/a", {"data": DESIGN_A})
    fake_api.on("GET", "/api/automation/designs/b", {"data": DESIGN_B})
    return fake_api


@pytest.fixture
def launched(monkeypatch):
    urls = []
    monkeypatch.setattr("click.launch", lambda url, **_: urls.append(url))
    return urls


# ============================================================================
#                                open / completion
# ============================================================================


def test_open_dashboard(invoke, launched):
    result = invoke("open")

    assert result.exit_code == 0
    assert launched == ["https://www.canvelete.com/dashboard"]


def test_open_design_on_custom_base_url(runner, fs, launched):
    app = build_container(
        InMemoryConfigStore({"base_url": "https://canvelete.test"}),
        InMemoryProfileStore(),
        environ={},
    )

    result = runner.invoke(
        canvelete, ["--no-flight-recorder", "open", "-d", "d1"], obj=app
    )

    assert result.exit_code == 0, result.output
    assert launched == ["https://canvelete.test/editor/d1"]


@pytest.mark.parametrize("shell", ["bash", "zsh", "fish"])
def test_completion_scripts(invoke, shell):
    result = invoke("completion", "-s", shell)

    assert result.exit_code == 0
    assert "_CANVELETE_COMPLETE" in result.stdout


def test_completion_rejects_unknown_shell(invoke):
    result = invoke("completion", "-s", "tcsh")

    assert result.exit_code == 2


# ============================================================================
#                                  diff / clone
# ============================================================================


def test_diff_table(invoke, two_designs):
    result = invoke("diff", "a", "b")

    assert result.exit_code == 0, result.output
    assert "Design Comparison" in result.stdout
    assert "Summer Sale" in result.stdout
    assert "Design 1: 3 elements" in result.stdout
    assert "Design 2: 2 elements" in result.stdout
    assert "Element Types:" not in result.stdout


def test_diff_by_element_type(invoke, two_designs):
    result = invoke("diff", "a", "b", "--elements")

    lines = [line.strip() for line in result.stdout.splitlines()]
    assert "Element Types:" in lines
    assert f"{'text'.ljust(12)} 2 -> 1 -1" in lines
    assert f"{'image'.ljust(12)} 1 -> 0 -1" in lines
    assert f"{'rectangle'.ljust(12)} 0 -> 1 +1" in lines


def test_diff_json_lists_differences(invoke, two_designs):
    result = invoke("diff", "a", "b", "--json")

    report = json.loads(result.stdout)
    assert report["design1"]["id"] == "a"
    assert report["differences"] == [
        {"path": "name", "value1": "Spring Sale", "value2": "Summer Sale"},
        {"path": "width", "value1": 1080, "value2": 1200},
    ]


def test_diff_missing_design(invoke, fake_api):
    fake_api.on("GET", "/api/automation/designs/a", {"data": DESIGN_A})

    result = invoke("diff", "a", "zzz")

    assert result.exit_code == 1
    assert "No route for /api/automation/designs/zzz" in result.stderr


def test_clone_scaled(invoke, two_designs):
    two_designs.on("POST", "/api/automation/designs", {"data": {"id": "new-1"}})

    result = invoke("clone", "a", "--scale", "0.5", "--height", "600")

    assert result.exit_code == 0, result.output
    assert two_designs.body("POST", "/api/automation/designs") == {
        "name": "Clone of Spring Sale",
        "width": 540,
        "height": 600,
        "canvasData": DESIGN_A["canvasData"],
        "description": "Cloned from a",
    }
    assert "New ID:   new-1" in result.stderr
    assert "Size:     540x600" in result.stderr


def test_clone_named(invoke, two_designs):
    two_designs.on("POST", "/api/automation/designs", {"data": {"id": "new-2"}})

    invoke("clone", "b", "-n", "Autumn Sale")

    body = two_designs.body("POST", "/api/automation/designs")
    assert (body["name"], body["width"], body["height"]) == ("Autumn Sale", 1200, 1080)


def test_clone_rejects_non_positive_scale(invoke, two_designs):
    result = invoke("clone", "a", "--scale", "0")

    assert result.exit_code == 1
    assert "Scale must be a positive number" in result.stderr
    assert not two_designs.calls("POST", "/api/automation/designs")


# ============================================================================
#                                     assets
# ============================================================================


def test_assets_list_with_type(invoke, fake_api):
    fake_api.on(
        "GET",
        "/api/assets/library",
        {"data": [{"id": "as1", "name": "logo.png", "type": "IMAGE", "size": 1536}]},
    )

    result = invoke("assets", "list", "-t", "image", "-l", "5")

    assert result.exit_code == 0, result.output
    request = fake_api.calls("GET", "/api/assets/library")[0]
    assert dict(request.url.params) == {"page": "1", "limit": "5", "type": "IMAGE"}
    assert "logo.png" in result.stdout
    assert "1.5 KB" in result.stdout


def test_assets_empty(invoke, fake_api):
    fake_api.on("GET", "/api/assets/library", {"data": []})

    result = invoke("assets", "list")

    assert "No assets found." in result.stderr


def test_assets_delete_forced(invoke, fake_api):
    fake_api.on("DELETE", "/api/assets/as1", {"success": True})

    result = invoke("assets", "delete", "as1", "-f")

    assert result.exit_code == 0
    assert "Asset deleted successfully" in result.stderr


def test_assets_stock_search(invoke, fake_api):
    fake_api.on(
        "GET",
        "/api/assets/stock-images",
        {"data": [{"tags": "mountain, lake", "imageWidth": 640, "imageHeight": 480,
                   "previewURL": "https://cdn.test/p.jpg"}]},
    )

    result = invoke("assets", "stock", "mountain")

    assert 'Stock Images for "mountain"' in result.stdout
    assert "640x480 | https://cdn.test/p.jpg" in result.stdout
    params = fake_api.calls("GET", "/api/assets/stock-images")[0].url.params
    assert (params["query"], params["perPage"]) == ("mountain", "20")


def test_assets_icons(invoke, fake_api):
    fake_api.on("GET", "/api/assets/icons", {"data": [{"name": "star", "url": "https://cdn.test/star.svg"}]})

    result = invoke("assets", "icons", "star")

    assert " 1. star" in result.stdout


def test_assets_fonts(invoke, fake_api):
    fake_api.on(
        "GET", "/api/assets/fonts", {"data": [{"family": "Inter", "variants": ["400", "700"]}]}
    )

    result = invoke("assets", "fonts", "-c", "sans-serif")

    assert "Inter" in result.stdout
    assert "Variants: 400, 700" in result.stdout
    assert fake_api.calls("GET", "/api/assets/fonts")[0].url.params["category"] == "sans-serif"


# ============================================================================
#                                    apikeys
# ============================================================================


def test_apikeys_list(invoke, fake_api):
    fake_api.on(
        "GET",
        "/api/automation/api-keys",
        {"data": [{"id": "k1", "name": "CI", "keyPrefix": "cvt_ci", "status": "ACTIVE"}]},
    )

    result = invoke("apikeys", "list")

    assert "cvt_ci" in result.stdout
    assert "Never" in result.stdout


def test_apikeys_create_prints_key_once(invoke, fake_api):
    fake_api.on(
        "POST",
        "/api/automation/api-keys",
        {"data": {"id": "k2", "name": "Deploy", "key": "cvt_live_secret"}},
    )

    result = invoke("apikeys", "create", "-n", "Deploy", "-e", "2027-01-01")

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "API Key: cvt_live_secret"
    assert fake_api.body("POST", "/api/automation/api-keys") == {
        "name": "Deploy",
        "expiresAt": "2027-01-01",
    }
    assert "will not be shown again" in result.stderr


def test_apikeys_create_prompts_for_name(invoke, fake_api):
    fake_api.on("POST", "/api/automation/api-keys", {"data": {"key": "k"}})

    invoke("apikeys", "create", input="\n")

    assert fake_api.body("POST", "/api/automation/api-keys") == {"name": "CLI Key"}


def test_apikeys_revoke_declined(invoke, fake_api):
    result = invoke("apikeys", "revoke", "k1", input="n\n")

    assert result.exit_code == 1
    assert not fake_api.requests


# ============================================================================
#                                 usage / billing
# ============================================================================


def test_usage_stats(invoke, fake_api):
    fake_api.on(
        "GET",
        "/api/v1/usage/stats",
        {"data": {"creditsUsed": 40, "creditLimit": 100, "creditsRemaining": 60,
                  "apiCalls": 7, "apiCallLimit": 1000, "renders": 12, "storageUsed": 1048576}},
    )

    result = invoke("usage", "stats")

    assert result.exit_code == 0
    assert "Usage Statistics" in result.stdout
    assert "40 / 100" in result.stdout
    assert "1 MB" in result.stdout


def test_usage_history_json(invoke, fake_api):
    document = {"data": [{"type": "RENDER", "credits": 1}], "pagination": {"total": 1}}
    fake_api.on("GET", "/api/v1/usage/history", document)

    result = invoke("usage", "history", "--json")

    assert json.loads(result.stdout) == document


def test_billing_info(invoke, fake_api):
    fake_api.on(
        "GET", "/api/v1/billing/info", {"data": {"plan": "PRO", "status": "active", "creditBalance": 250}}
    )

    result = invoke("billing", "info")

    assert "Billing Information" in result.stdout
    assert "PRO" in result.stdout
    assert "250" in result.stdout


def test_billing_invoices(invoke, fake_api):
    fake_api.on(
        "GET",
        "/api/v1/billing/invoices",
        {"data": [{"id": "inv_1", "amount": 19, "currency": "USD", "status": "paid"}]},
    )

    result = invoke("billing", "invoices")

    assert "USD 19.00" in result.stdout
    assert "paid" in result.stdout
