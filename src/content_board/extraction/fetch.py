"""Browser-like HTTP fetching with status-tagged errors."""

from typing import Any

import httpx

from content_board.extraction.errors import TransportError

# Full header set; bare clients get blocked or served consent pages far more often
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9,ar;q=0.8",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
}


def build_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Create a short-lived client for one extraction attempt."""
    return httpx.AsyncClient(
        headers=BROWSER_HEADERS,
        follow_redirects=True,
        timeout=httpx.Timeout(15.0),
        transport=transport,
    )


async def _get(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    try:
        response = await client.get(url, params=params, headers=headers, timeout=timeout)
    except httpx.TimeoutException as exc:
        raise TransportError(f"Request timeout after {timeout:.0f}s") from exc
    except httpx.HTTPError as exc:
        raise TransportError(f"Request failed: {exc}") from exc

    if not response.is_success:
        raise TransportError(
            f"HTTP {response.status_code}: {response.reason_phrase}",
            status_code=response.status_code,
        )
    return response


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    params: dict[str, str] | None = None,
) -> str:
    """GET a document and return its decoded body.

    Raises:
        TransportError: On timeout, connection failure, or a non-2xx status.
    """
    response = await _get(client, url, timeout, params=params)
    return response.text


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    params: dict[str, str] | None = None,
) -> dict[str, Any]:
    """GET a JSON endpoint and return the decoded object.

    Raises:
        TransportError: As ``fetch_text``, or when the body is not a JSON object.
    """
    response = await _get(
        client, url, timeout, params=params, headers={"Accept": "application/json"}
    )
    try:
        payload = response.json()
    except ValueError as exc:
        raise TransportError(f"Invalid JSON from {response.url.host}") from exc
    if not isinstance(payload, dict):
        raise TransportError(f"Unexpected JSON payload from {response.url.host}")
    return payload
