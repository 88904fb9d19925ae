"""Token verifier port (abstract interface).

Bearer-token validation belongs to the authentication provider, not to this
service. Adapters implementing this port turn a raw token into the Caller it
was issued to, so policies never see tokens at all.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Caller:
    """The identity a request was made with."""

    id: str
    username: str | None = None
    email: str | None = None
    role_type: str | None = None
    role_name: str | None = None
    role_code: str | None = None


class TokenVerifier(ABC):
    """Abstract bearer-token verifier."""

    @abstractmethod
    def verify(self, token: str) -> Caller | None:
        """Return the Caller the token belongs to, or None when it is not valid."""
        ...
