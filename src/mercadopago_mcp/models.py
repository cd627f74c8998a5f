import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from mcp import types
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from .consts import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT, MIN_SEARCH_LIMIT

# =============================================================================
# UNIFIED RESPONSE MODEL
# =============================================================================
# Single envelope returned by every tool, success or handled failure


class ToolResponse(BaseModel):
    """Uniform result envelope for all MCP tools."""

    content: list[types.TextContent] = Field(
        ..., description="Ordered text blocks returned to the caller"
    )
    is_error: bool = Field(
        False, description="Whether the tool reports a handled failure"
    )

    @classmethod
    def text(cls, text: str, *, is_error: bool = False) -> "ToolResponse":
        """Create a single-block text response."""
        return cls(
            content=[types.TextContent(type="text", text=text)], is_error=is_error
        )

    @property
    def texts(self) -> list[str]:
        return [block.text for block in self.content]

    def to_result(self) -> types.CallToolResult:
        """Convert to the MCP wire result."""
        return types.CallToolResult(content=list(self.content), isError=self.is_error)


# =============================================================================
# AUTH MODELS
# =============================================================================


@dataclass(frozen=True)
class Credentials:
    """OAuth client credentials, fixed for the process lifetime."""

    client_id: str
    client_secret: str = field(repr=False)


@dataclass(frozen=True)
class CachedToken:
    """Bearer token as held by the TokenStore.

    ``expires_in`` is the lifetime hint from the exchange; it is recorded
    but freshness is only discovered through 401 responses.
    """

    value: str = field(repr=False)
    obtained_at: datetime
    expires_in: int | None = None


# =============================================================================
# REQUEST MODELS
# =============================================================================


@dataclass
class RequestContext:
    """Per-invocation bookkeeping used for logging and latency."""

    tool_name: str
    request_id: str
    start_time: float = field(default_factory=time.monotonic)

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.start_time) * 1000)

    def to_log(self) -> dict[str, Any]:
        return {"toolName": self.tool_name, "requestId": self.request_id}


class SiteId(StrEnum):
    """Mercado Pago sites with published developer documentation."""

    MLB = "MLB"
    MLM = "MLM"
    MLA = "MLA"
    MLU = "MLU"
    MLC = "MLC"
    MCO = "MCO"
    MPE = "MPE"


Language = Literal["es", "pt"]


class ToolArguments(BaseModel):
    """Base for tool argument models.

    Unknown keys are ignored. Aliased fields only validate under their wire
    name (``siteId``, never ``site_id``).
    """

    model_config = ConfigDict(extra="ignore")


class NoArguments(ToolArguments):
    """Arguments of the listing tools."""


class CreateCustomerArgs(ToolArguments):
    email: StrictStr = Field(..., description="Email of the customer")


class SearchDocumentationArgs(ToolArguments):
    """Arguments of search_documentation."""

    language: Language = Field(
        ..., description="Language of the documentation (es: Spanish, pt: Portuguese)"
    )
    query: StrictStr = Field(..., description="Search query")
    site_id: SiteId = Field(
        ..., alias="siteId", description="Site ID for documentation"
    )
    limit: Annotated[
        float, Field(ge=MIN_SEARCH_LIMIT, le=MAX_SEARCH_LIMIT, strict=True)
    ] | None = Field(None, description="Maximum number of results to return")

    @property
    def max_results(self) -> int | float:
        """Upstream ``maxResults`` value, integral limits sent as ints."""
        if self.limit is None:
            return DEFAULT_SEARCH_LIMIT
        return int(self.limit) if float(self.limit).is_integer() else self.limit


class SearchResult(BaseModel):
    """One entry of the documentation search answer."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    content: str | None = None
    url: str | None = None
    score: int | float | None = None
