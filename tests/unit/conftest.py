"""Default marks and shared fakes for tests under `tests/unit/`."""

from pathlib import Path

import pytest

from .service_layer.fakes import FakeClock, FakeRenderApi, FakeSleep

# pylint: disable=unused-argument,redefined-outer-name

UNIT_ROOT = Path(__file__).parent.resolve()
MARKER_NAME = "unit"


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `unit` marks to items in `tests/unit/`."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        if UNIT_ROOT in path.parents:
            if not any(marker.name == MARKER_NAME for marker in item.iter_markers()):
                item.add_marker(pytest.mark.unit)


@pytest.fixture
def fake_api() -> FakeRenderApi:
    """Render API whose renders always succeed."""
    return FakeRenderApi()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleep(clock) -> FakeSleep:
    return FakeSleep(clock)
