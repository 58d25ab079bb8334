"""Process identifier tokens for correlating log records."""

from __future__ import annotations

import uuid


class CorrelationTokenProvider:
    """Issues one token per logical unit of work.

    The token is created lazily and stays the same until ``generate()`` is
    called, which happens at the start of every new unit of work (HTTP
    request or queued job).
    """

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get_token(self) -> str:
        """Return the current token, creating one on first use."""
        if self._token is None:
            self.generate()
        return self._token  # type: ignore[return-value]

    def generate(self) -> None:
        """Replace the current token with a new one."""
        self._token = uuid.uuid4().hex
