"""Tests for the access policy predicates and the fake token verifier."""

import pytest
from shared.access import FakeTokenVerifier, get_verifier, reset_verifier, set_verifier
from shared.access.policies import is_admin, is_authenticated, is_authorized
from shared.access.port import Caller


class TestIsAuthenticated:
    def test_caller_is_authenticated(self):
        assert is_authenticated(Caller(id="user-001"))

    def test_missing_caller_is_not(self):
        assert not is_authenticated(None)


class TestIsAdmin:
    def test_admin_role_type(self):
        assert is_admin(Caller(id="u", role_type="admin"))

    def test_admin_role_name(self):
        assert is_admin(Caller(id="u", role_type="authenticated", role_name="Admin"))

    @pytest.mark.parametrize(
        "caller",
        [
            Caller(id="u"),
            Caller(id="u", role_type="authenticated", role_name="Customer"),
            Caller(id="u", role_type="Admin"),
            Caller(id="u", role_name="admin"),
        ],
    )
    def test_other_roles_are_not_admin(self, caller):
        assert not is_admin(caller)

    def test_missing_caller_is_not_admin(self):
        assert not is_admin(None)


class TestIsAuthorized:
    @pytest.mark.parametrize("role", ["strapi-super-admin", "operator", "editor"])
    def test_dashboard_role_codes(self, role):
        assert is_authorized(Caller(id="u", role_code=role))

    def test_role_type_is_used_without_code(self):
        assert is_authorized(Caller(id="u", role_type="operator"))

    def test_role_code_takes_precedence(self):
        assert not is_authorized(Caller(id="u", role_code="customer", role_type="operator"))

    def test_unknown_role(self):
        assert not is_authorized(Caller(id="u", role_type="authenticated"))

    def test_missing_caller(self):
        assert not is_authorized(None)


class TestVerifierRegistry:
    def test_defaults_to_fake_verifier(self):
        assert isinstance(get_verifier(), FakeTokenVerifier)

    def test_override_and_reset(self):
        custom = FakeTokenVerifier()
        set_verifier(custom)
        assert get_verifier() is custom
        reset_verifier()
        assert get_verifier() is not custom

    def test_issued_token_verifies(self):
        verifier = FakeTokenVerifier()
        caller = Caller(id="user-001")
        token = verifier.issue(caller)
        assert verifier.verify(token) == caller
        assert verifier.calls == [token]

    def test_revoked_token_does_not_verify(self):
        verifier = FakeTokenVerifier()
        token = verifier.issue(Caller(id="user-001"))
        verifier.revoke(token)
        assert verifier.verify(token) is None
