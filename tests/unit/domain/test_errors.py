"""Unit tests for canvelete.domain.errors."""

import pytest

from canvelete.domain.errors import (
    CanveleteError,
    DataParseError,
    NotAuthenticatedError,
    NotFoundError,
    RenderTimeoutError,
    ValidationError,
)

# pylint: disable=magic-value-comparison


@pytest.mark.parametrize(
    "error",
    [
        ValidationError("bad"),
        DataParseError("x.json", "oops"),
        NotFoundError("profile", "work"),
        NotAuthenticatedError(),
        RenderTimeoutError("j1", 1000, "pending"),
    ],
)
def test_all_errors_share_the_base(error):
    assert isinstance(error, CanveleteError)


def test_not_found_lists_alternatives():
    error = NotFoundError("profile", "work", ["default", "prod"])
    assert str(error) == "Profile 'work' not found (available: default, prod)"
    assert error.available == ["default", "prod"]


def test_not_authenticated_points_to_login():
    assert "canvelete auth login" in str(NotAuthenticatedError())
    assert "CANVELETE_API_KEY" in str(NotAuthenticatedError())


def test_render_timeout_is_a_timeout_error():
    error = RenderTimeoutError("j1", 5000, "processing")
    assert isinstance(error, TimeoutError)
    assert str(error) == "Render job j1 did not finish within 5s (last status: processing)"


def test_render_timeout_without_status():
    assert str(RenderTimeoutError("j1", 1500, None)) == "Render job j1 did not finish within 1.5s"


def test_data_parse_error_message():
    error = DataParseError("batch.json", "Expecting value")
    assert str(error) == "Invalid JSON in batch.json: Expecting value"
    assert error.source == "batch.json"
