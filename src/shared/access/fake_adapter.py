"""In-memory token verifier for development and testing.

Tokens are registered explicitly (or issued for a Caller) and every lookup is
recorded in ``calls`` so tests can assert on what was verified.
"""

from uuid import uuid4

from shared.access.port import Caller, TokenVerifier


class FakeTokenVerifier(TokenVerifier):
    """Verifier backed by a token → Caller dictionary."""

    def __init__(self) -> None:
        self.tokens: dict[str, Caller] = {}
        self.calls: list[str] = []

    def register(self, token: str, caller: Caller) -> None:
        self.tokens[token] = caller

    def issue(self, caller: Caller) -> str:
        """Mint a fresh token for ``caller`` and return it."""
        token = f"fake_{uuid4().hex}"
        self.register(token, caller)
        return token

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)

    def verify(self, token: str) -> Caller | None:
        self.calls.append(token)
        return self.tokens.get(token)
