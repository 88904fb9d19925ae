"""Access policies and the FastAPI dependencies that enforce them.

The three predicates are pure functions of the resolved Caller and fail
closed on a missing identity. The ``require_*`` dependencies run before the
route body, so a denied request never reaches the domain.
"""

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.access import get_verifier
from shared.access.port import Caller
from shared.errors import ForbiddenError, NotAuthenticatedError

logger = structlog.get_logger(__name__)

ADMIN_ROLE_TYPE = "admin"
ADMIN_ROLE_NAME = "Admin"

# Roles allowed into the operations dashboard
DASHBOARD_ROLES = frozenset({"strapi-super-admin", "operator", "editor"})

_bearer = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------
def is_authenticated(caller: Caller | None) -> bool:
    return caller is not None


def is_admin(caller: Caller | None) -> bool:
    if caller is None:
        return False
    return caller.role_type == ADMIN_ROLE_TYPE or caller.role_name == ADMIN_ROLE_NAME


def is_authorized(caller: Caller | None) -> bool:
    """Dashboard policy: the caller's role code, else its role type, is allow-listed."""
    if caller is None:
        return False
    role = caller.role_code or caller.role_type
    return role in DASHBOARD_ROLES


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------
def current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> Caller | None:
    """Resolve the bearer token, if any, to a Caller."""
    if credentials is None:
        return None
    return get_verifier().verify(credentials.credentials)


def require_authenticated(caller: Caller | None = Depends(current_caller)) -> Caller:
    if not is_authenticated(caller):
        raise NotAuthenticatedError()
    return caller


def require_admin(caller: Caller | None = Depends(current_caller)) -> Caller:
    if not is_authenticated(caller):
        raise NotAuthenticatedError()
    if not is_admin(caller):
        logger.warning("policy.denied", policy="is-admin", caller_id=caller.id)
        raise ForbiddenError("Admin access required")
    return caller


def require_dashboard_role(caller: Caller | None = Depends(current_caller)) -> Caller:
    if not is_authenticated(caller):
        raise NotAuthenticatedError()
    if not is_authorized(caller):
        logger.warning("policy.denied", policy="is-authorized", caller_id=caller.id)
        raise ForbiddenError("You do not have permission to access the dashboard")
    return caller
