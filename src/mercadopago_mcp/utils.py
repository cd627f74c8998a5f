"""Utility functions for documentation links."""

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, ErrorData

from .consts import SITE_DOMAINS


def build_documentation_url(site_domain: str, language: str, path: str | None) -> str:
    """Compose the public URL of a documentation page.

    Args:
        site_domain: Host of the site, e.g. ``www.mercadopago.com.ar``.
        language: Documentation language (``es`` or ``pt``).
        path: Page path as returned by the search API; may be empty.

    Returns:
        ``https://<site_domain>/developers/<language><path>``

    Raises:
        McpError: INVALID_PARAMS if site_domain or language is missing.
    """
    if not site_domain or not language:
        raise McpError(
            ErrorData(
                code=INVALID_PARAMS,
                message="Missing required parameters for URL construction",
            )
        )
    return f"https://{site_domain}/developers/{language}{path or ''}"


def site_domain(site_id: str) -> str | None:
    """Domain of a site id, None when unknown."""
    return SITE_DOMAINS.get(str(site_id))
