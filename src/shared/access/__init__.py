"""Token verifier factory.

Provides get_verifier() / set_verifier() to swap implementations:
- FakeTokenVerifier for development and testing
- an identity-provider adapter in deployed environments
"""

from shared.access.fake_adapter import FakeTokenVerifier
from shared.access.port import Caller, TokenVerifier

__all__ = ["Caller", "FakeTokenVerifier", "TokenVerifier", "get_verifier", "set_verifier", "reset_verifier"]

_current_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    """Return the current token verifier. Defaults to FakeTokenVerifier."""
    global _current_verifier
    if _current_verifier is None:
        _current_verifier = FakeTokenVerifier()
    return _current_verifier


def set_verifier(verifier: TokenVerifier) -> None:
    """Override the active token verifier (useful for tests)."""
    global _current_verifier
    _current_verifier = verifier


def reset_verifier() -> None:
    """Reset to default verifier."""
    global _current_verifier
    _current_verifier = None
