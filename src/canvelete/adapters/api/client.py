"""HTTP client for the Canvelete REST API, built on `httpx.AsyncClient`.

Every method performs exactly one request. JSON endpoints return the decoded
body unchanged (including any ``data`` envelope); binary endpoints (render,
export) return the raw response bytes. Non-2xx answers raise
`HttpError`; transport failures raise `ApiConnectionError`.

Usage::

    async with CanveleteClient(api_key, base_url) as client:
        designs = await client.list_designs(limit=5)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from canvelete import __version__
from canvelete.interfaces.api_errors import ApiConnectionError, HttpError
from canvelete.interfaces.render_api import RenderApi

logger = logging.getLogger(__name__)

USER_AGENT = f"canvelete-cli/{__version__}"
DEFAULT_TIMEOUT = 60.0
DEFAULT_PAGE_SIZE = 20

# pylint: disable=redefined-builtin,too-many-public-methods


def _page(page: int, limit: int) -> dict[str, Any]:
    return {"page": page, "limit": limit}


def _error_message(response: httpx.Response) -> str | None:
    """Pull ``error`` (else ``message``) out of an error body, if it is JSON."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error") or body.get("message")
    return None


class CanveleteClient(RenderApi):
    """Authenticated client for one API key and base URL.

    Args:
        api_key: Sent as ``Authorization: Bearer <api_key>``.
        base_url: Scheme and host of the API (no trailing ``/api``).
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in
            tests.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "User-Agent": USER_AGENT,
            },
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> CanveleteClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()

    # --- Transport ---

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        logger.debug("%s %s params=%s", method, endpoint, params)
        try:
            response = await self._http.request(
                method, endpoint, json=json, params=params
            )
        except httpx.HTTPError as e:
            reason = str(e) or type(e).__name__
            raise ApiConnectionError(f"{self.base_url}{endpoint}", reason) from e

        logger.debug("%s %s -> %d", method, endpoint, response.status_code)
        if not response.is_success:
            raise HttpError(response.status_code, _error_message(response))
        return response

    async def _json(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        response = await self._send(method, endpoint, **kwargs)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ApiConnectionError(
                f"{self.base_url}{endpoint}", f"response is not JSON ({e})"
            ) from e

    async def _binary(self, method: str, endpoint: str, **kwargs: Any) -> bytes:
        response = await self._send(method, endpoint, **kwargs)
        return response.content

    # --- Designs ---

    async def list_designs(
        self,
        *,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        is_template: bool | None = None,
        status: str | None = None,
    ) -> Any:
        params = _page(page, limit)
        if is_template is not None:
            params["isTemplate"] = str(is_template).lower()
        if status:
            params["status"] = status
        return await self._json("GET", "/api/automation/designs", params=params)

    async def get_design(self, design_id: str) -> Any:
        return await self._json("GET", f"/api/automation/designs/{design_id}")

    async def create_design(self, data: dict[str, Any]) -> Any:
        return await self._json("POST", "/api/automation/designs", json=data)

    async def update_design(self, design_id: str, data: dict[str, Any]) -> Any:
        return await self._json("PATCH", f"/api/automation/designs/{design_id}", json=data)

    async def delete_design(self, design_id: str) -> Any:
        return await self._json("DELETE", f"/api/automation/designs/{design_id}")

    async def duplicate_design(self, design_id: str, name: str | None = None) -> Any:
        return await self._json(
            "POST", f"/api/automation/designs/{design_id}/duplicate", json={"name": name}
        )

    async def export_design(
        self, design_id: str, format: str = "png", quality: int = 100
    ) -> bytes:
        return await self._binary(
            "POST",
            f"/api/automation/designs/{design_id}/export",
            json={"format": format, "quality": quality},
        )

    # --- Templates ---

    async def list_templates(
        self,
        *,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        search: str | None = None,
        category: str | None = None,
    ) -> Any:
        params = _page(page, limit)
        if search:
            params["search"] = search
        if category:
            params["category"] = category
        return await self._json("GET", "/api/automation/templates", params=params)

    async def get_template(self, template_id: str) -> Any:
        """Templates are designs; they are fetched from the designs endpoint."""
        return await self.get_design(template_id)

    # --- Render ---

    async def render(self, payload: dict[str, Any]) -> bytes:
        return await self._binary("POST", "/api/automation/render", json=payload)

    async def render_async(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._json("POST", "/api/v1/render/async", json=payload)

    async def get_render_status(self, job_id: str) -> dict[str, Any]:
        return await self._json("GET", f"/api/v1/render/status/{job_id}")

    async def list_renders(self, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Any:
        return await self._json("GET", "/api/automation/render", params=_page(page, limit))

    # --- Assets ---

    async def list_assets(
        self, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE, type: str | None = None
    ) -> Any:
        params = _page(page, limit)
        if type:
            params["type"] = type
        return await self._json("GET", "/api/assets/library", params=params)

    async def delete_asset(self, asset_id: str) -> Any:
        return await self._json("DELETE", f"/api/assets/{asset_id}")

    async def search_stock_images(
        self, query: str, *, page: int = 1, per_page: int = DEFAULT_PAGE_SIZE
    ) -> Any:
        params = {"query": query, "page": page, "perPage": per_page}
        return await self._json("GET", "/api/assets/stock-images", params=params)

    async def search_icons(
        self, query: str, *, page: int = 1, per_page: int = DEFAULT_PAGE_SIZE
    ) -> Any:
        params = {"query": query, "page": page, "perPage": per_page}
        return await self._json("GET", "/api/assets/icons", params=params)

    async def list_fonts(self, category: str | None = None) -> Any:
        params = {"category": category} if category else None
        return await self._json("GET", "/api/assets/fonts", params=params)

    # --- API keys ---

    async def list_api_keys(self, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Any:
        return await self._json("GET", "/api/automation/api-keys", params=_page(page, limit))

    async def create_api_key(self, name: str, expires_at: str | None = None) -> Any:
        data: dict[str, Any] = {"name": name}
        if expires_at:
            data["expiresAt"] = expires_at
        return await self._json("POST", "/api/automation/api-keys", json=data)

    async def revoke_api_key(self, key_id: str) -> Any:
        return await self._json("DELETE", f"/api/automation/api-keys/{key_id}")

    # --- Usage & billing ---

    async def get_usage_stats(self) -> Any:
        return await self._json("GET", "/api/v1/usage/stats")

    async def get_usage_history(self, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Any:
        return await self._json("GET", "/api/v1/usage/history", params=_page(page, limit))

    async def get_billing_info(self) -> Any:
        return await self._json("GET", "/api/v1/billing/info")

    async def get_invoices(self, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Any:
        return await self._json("GET", "/api/v1/billing/invoices", params=_page(page, limit))

    # --- Canvas ---

    async def add_element(self, design_id: str, element: dict[str, Any]) -> Any:
        return await self._json(
            "POST", f"/api/designs/{design_id}/elements", json={"element": element}
        )

    async def get_elements(self, design_id: str) -> Any:
        return await self._json("GET", f"/api/designs/{design_id}/canvas")

    async def clear_canvas(self, design_id: str) -> Any:
        return await self._json("DELETE", f"/api/designs/{design_id}/canvas/elements")

    async def resize_canvas(self, design_id: str, width: int, height: int) -> Any:
        return await self._json(
            "PATCH",
            f"/api/designs/{design_id}/canvas/resize",
            json={"width": width, "height": height},
        )
