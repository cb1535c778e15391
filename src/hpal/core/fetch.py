"""Fetch raw API documentation for a package at a git ref."""

from __future__ import annotations

import logging

import httpx

from hpal.config import DOCS_URL


logger = logging.getLogger(__name__)


def docs_url(owner: str, pkg: str, ref: str, template: str = DOCS_URL) -> str:
    """Return the raw documentation URL for owner/pkg at ref."""
    return template.format(owner=owner, pkg=pkg, ref=ref)


async def fetch_api_doc(
    owner: str,
    pkg: str,
    ref: str,
    *,
    client: httpx.AsyncClient | None = None,
    template: str = DOCS_URL,
    timeout: float = 10.0,
) -> str:
    """Fetch the API.md document for owner/pkg at ref.

    Args:
        owner: GitHub user or organization.
        pkg: Package (repository) name.
        ref: Git tag or branch.
        client: Optional httpx.AsyncClient. If not provided, a new client is
            created for this request.
        template: URL template with owner, pkg and ref placeholders.
        timeout: Request timeout in seconds, used only for a created client.

    Returns:
        The document text.

    Raises:
        httpx.HTTPStatusError: On a non-2xx response.
        httpx.RequestError: On transport failures (DNS, connection, timeout).
    """
    url = docs_url(owner, pkg, ref, template)
    logger.debug("Fetching %s", url)

    async def do_fetch(http_client: httpx.AsyncClient) -> str:
        response = await http_client.get(url)
        response.raise_for_status()
        return response.text

    if client is not None:
        return await do_fetch(client)

    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True) as new_client:
        return await do_fetch(new_client)
