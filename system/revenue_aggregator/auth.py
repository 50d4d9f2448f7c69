"""Shared-secret authentication for live event submission."""

from __future__ import annotations

import hmac

BEARER_PREFIX = "bearer "


class SharedSecretAuth:
    """Accept requests whose Authorization header carries the shared secret.

    Both ``Bearer <secret>`` and the bare secret are accepted. An empty
    configured secret authorizes nothing.
    """

    def __init__(self, secret: str) -> None:
        self._secret = secret.encode("utf-8")

    @staticmethod
    def extract_token(header: str | None) -> str | None:
        if header is None:
            return None
        value = header.strip()
        if value.lower().startswith(BEARER_PREFIX):
            value = value[len(BEARER_PREFIX) :].strip()
        return value or None

    def is_authorized(self, header: str | None) -> bool:
        token = self.extract_token(header)
        if token is None or not self._secret:
            return False
        return hmac.compare_digest(token.encode("utf-8"), self._secret)
