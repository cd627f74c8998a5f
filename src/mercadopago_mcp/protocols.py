"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol


class TokenSource(Protocol):
    """Protocol for bearer token sources used by the request pipeline."""

    async def acquire(self) -> str:
        """Get the current bearer token, exchanging credentials if none is cached.

        Returns:
            Bearer token string.

        Raises:
            AuthError: If a token cannot be obtained.
        """
        ...

    def clear(self) -> None:
        """Discard the cached token. Idempotent."""
        ...
