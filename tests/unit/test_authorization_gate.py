"""
Unit tests for AuthorizationGate.

Verifies every rejection path of authorize() and that revocation is
observed on the very next call, independent of the token's expiry.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.adapters.security import JwtSessionTokens
from src.domain.accounts import AccountService
from src.domain.authorization import AuthorizationGate
from src.domain.exceptions import AccountRevoked, AuthenticationRequired, SessionInvalid
from src.domain.ports import AccountStatus

SECRET = "gate-test-secret-key-long-enough-for-hmac"


class TestMissingOrInvalidCredential:
    """Tests for credential-level rejections."""

    @pytest.mark.parametrize("credential", [None, ""])
    def test_missing_credential_requires_authentication(
        self, gate: AuthorizationGate, credential: str | None
    ) -> None:
        with pytest.raises(AuthenticationRequired) as exc_info:
            gate.authorize(credential)

        assert exc_info.value.redirect is False
        assert exc_info.value.message == "Authentication required"

    def test_garbage_token_is_invalid(self, gate: AuthorizationGate) -> None:
        with pytest.raises(SessionInvalid) as exc_info:
            gate.authorize("not-a-jwt")

        assert exc_info.value.redirect is True
        assert exc_info.value.message == "Invalid or expired token"

    def test_token_signed_with_other_key_is_invalid(
        self, gate: AuthorizationGate, make_account
    ) -> None:
        account = make_account("a@example.com", AccountStatus.ACTIVE)
        forged = JwtSessionTokens(secret_key="another-secret-key-of-reasonable-size").issue(account.id)

        with pytest.raises(SessionInvalid):
            gate.authorize(forged)

    def test_expired_token_is_invalid(self, memory_repository, make_account) -> None:
        account = make_account("a@example.com", AccountStatus.ACTIVE)
        expired_tokens = JwtSessionTokens(secret_key=SECRET, ttl=timedelta(seconds=-1))
        gate = AuthorizationGate(repository=memory_repository, tokens=expired_tokens)

        with pytest.raises(SessionInvalid):
            gate.authorize(expired_tokens.issue(account.id))

    def test_token_without_subject_is_invalid(self, memory_repository) -> None:
        gate = AuthorizationGate(repository=memory_repository, tokens=JwtSessionTokens(SECRET))
        token = jwt.encode(
            {"exp": datetime.now(timezone.utc) + timedelta(hours=1)}, SECRET, algorithm="HS256"
        )

        with pytest.raises(SessionInvalid):
            gate.authorize(token)


class TestLiveAccountState:
    """Tests for store-backed checks after the token verifies."""

    def test_active_account_admitted(self, gate: AuthorizationGate, tokens, make_account) -> None:
        account = make_account("a@example.com", AccountStatus.ACTIVE)

        resolved = gate.authorize(tokens.issue(account.id))

        assert resolved.id == account.id
        assert resolved.status is AccountStatus.ACTIVE

    def test_unverified_account_admitted(self, gate: AuthorizationGate, tokens, make_account) -> None:
        account = make_account("u@example.com")

        assert gate.authorize(tokens.issue(account.id)).status is AccountStatus.UNVERIFIED

    def test_deleted_account_rejected_with_redirect(
        self, gate: AuthorizationGate, tokens, make_account, memory_repository
    ) -> None:
        account = make_account("a@example.com", AccountStatus.ACTIVE)
        token = tokens.issue(account.id)
        memory_repository.delete_by_ids([account.id])

        with pytest.raises(AccountRevoked) as exc_info:
            gate.authorize(token)

        assert exc_info.value.redirect is True
        assert exc_info.value.message == "Account has been deleted"

    def test_blocked_account_rejected_with_redirect(
        self, gate: AuthorizationGate, tokens, make_account
    ) -> None:
        account = make_account("a@example.com", AccountStatus.BLOCKED)

        with pytest.raises(AccountRevoked) as exc_info:
            gate.authorize(tokens.issue(account.id))

        assert exc_info.value.redirect is True
        assert exc_info.value.message == "Account is blocked"

    def test_snapshot_reflects_current_status(
        self, gate: AuthorizationGate, tokens, make_account, memory_repository
    ) -> None:
        """Status comes from the store, not from issuance time."""
        account = make_account("a@example.com")
        token = tokens.issue(account.id)
        memory_repository.activate(account.id)

        assert gate.authorize(token).status is AccountStatus.ACTIVE


class TestRevocationImmediacy:
    """A still-valid token stops working on the next call after block/delete."""

    def test_block_revokes_on_next_call(
        self, service: AccountService, gate: AuthorizationGate, make_account
    ) -> None:
        service.register("Alice", "alice@example.com", "password123")
        token = service.login("alice@example.com", "password123").access_token
        admin = make_account("admin@example.com", AccountStatus.ACTIVE)

        alice = gate.authorize(token)
        service.block_accounts(admin, [alice.id])

        with pytest.raises(AccountRevoked, match="blocked"):
            gate.authorize(token)

    def test_delete_revokes_on_next_call(
        self, service: AccountService, gate: AuthorizationGate, make_account
    ) -> None:
        service.register("Alice", "alice@example.com", "password123")
        token = service.login("alice@example.com", "password123").access_token
        admin = make_account("admin@example.com", AccountStatus.ACTIVE)

        alice = gate.authorize(token)
        service.delete_accounts(admin, [alice.id])

        with pytest.raises(AccountRevoked, match="deleted"):
            gate.authorize(token)

    def test_self_block_revokes_own_session(
        self, service: AccountService, gate: AuthorizationGate
    ) -> None:
        service.register("Alice", "alice@example.com", "password123")
        token = service.login("alice@example.com", "password123").access_token

        actor = gate.authorize(token)
        result = service.block_accounts(actor, [actor.id])

        assert result.self_affected is True
        with pytest.raises(AccountRevoked):
            gate.authorize(token)

    def test_unblock_restores_access(
        self, service: AccountService, gate: AuthorizationGate, make_account
    ) -> None:
        """Revocation is based on live state, so unblocking re-admits the same token."""
        service.register("Alice", "alice@example.com", "password123")
        token = service.login("alice@example.com", "password123").access_token
        admin = make_account("admin@example.com", AccountStatus.ACTIVE)
        alice = gate.authorize(token)

        service.block_accounts(admin, [alice.id])
        service.unblock_accounts(admin, [alice.id])

        assert gate.authorize(token).status is AccountStatus.ACTIVE
