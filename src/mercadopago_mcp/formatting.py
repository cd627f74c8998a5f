"""Markdown rendering of API payloads for tool responses."""

import logging
from typing import Any

from .models import SearchResult
from .utils import build_documentation_url, site_domain

logger = logging.getLogger("mercadopago-mcp.formatting")

SECTION_SEPARATOR = "\n\n---\n\n"


def render_document_types(records: list[dict[str, Any]]) -> str:
    """One section per identification type."""
    return SECTION_SEPARATOR.join(
        f"## {record.get('name')} \n id: {record.get('payment_type_id')} "
        f"\ntype: {record.get('type')}"
        for record in records
    )


def render_payment_methods(records: list[dict[str, Any]]) -> str:
    """One section per payment method."""
    return SECTION_SEPARATOR.join(
        f"## {record.get('name')} \n id: {record.get('payment_type_id')} "
        f"\nthumbnail: {record.get('thumbnail')}"
        for record in records
    )


def render_search_result(result: SearchResult, domain: str, language: str) -> str:
    url = build_documentation_url(domain, language, result.url)
    return (
        f"## {result.title or 'Untitled'}\n"
        f"{result.content or 'No description available'}\n"
        "\n"
        f"🔗 [Read more]({url})\n"
        "\n"
        f"Score: {_format_score(result.score)}\n"
    )


def _format_score(score: int | float | None) -> str:
    if not score:
        return "0"
    return str(int(score)) if float(score).is_integer() else str(score)


def render_search_results(
    query: str, results: list[SearchResult], site_id: str, language: str
) -> str:
    """Markdown digest of a documentation search.

    Results with neither title nor content are left out of the digest
    together with their separator, so no empty block appears between two
    rendered results. The count in the subheading is still the number of
    results the API returned.
    """
    domain = site_domain(site_id)
    blocks = []
    for result in results:
        if not result.title and not result.content:
            logger.debug(f"Incomplete search result: {result.model_dump()}")
            continue
        blocks.append(render_search_result(result, domain, language))

    return (
        f'# Search Results for "{query}"\n'
        f"Showing {len(results)} results\n"
        "\n"
        f"{SECTION_SEPARATOR.join(blocks) if results else 'No results found.'}"
    )
