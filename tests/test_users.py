"""
User store: unique e-mail, lookups and token-based account flows.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from shopstore.core.errors import ValidationFault


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def alice(user_store):
    return run(user_store.create({
        "username": "alice",
        "email": "Alice@Example.com",
        "password": "hashed",
        "verificationToken": "verify-me",
    }))


class TestUserCreate:

    def test_defaults(self, alice):
        assert alice["email"] == "alice@example.com"
        assert alice["role"] == "user"
        assert alice["isVerified"] is False
        assert alice["resetToken"] is None
        assert alice["lastLogin"] is None

    def test_email_is_unique_ignoring_case(self, user_store, alice):
        with pytest.raises(ValidationFault) as exc_info:
            run(user_store.create({"username": "al", "email": "ALICE@example.com", "password": "x"}))
        assert exc_info.value.field == "email"

    @pytest.mark.parametrize("missing", ["username", "email", "password"])
    def test_required_fields(self, user_store, missing):
        data = {"username": "bob", "email": "bob@example.com", "password": "x"}
        del data[missing]
        with pytest.raises(ValidationFault) as exc_info:
            run(user_store.create(data))
        assert exc_info.value.field == missing

    def test_update_lowercases_email(self, user_store, alice):
        updated = run(user_store.update(alice["id"], {"email": "NEW@example.com"}))
        assert updated["email"] == "new@example.com"


class TestUserLookups:

    def test_by_email(self, user_store, alice):
        assert run(user_store.get_user_by_email("ALICE@EXAMPLE.COM"))["id"] == alice["id"]
        assert run(user_store.get_user_by_email("")) is None

    def test_by_role(self, user_store, alice):
        run(user_store.create({"username": "root", "email": "root@example.com", "password": "x", "role": "admin"}))
        assert [u["username"] for u in run(user_store.find_users_by_role("admin"))] == ["root"]

    def test_search(self, user_store, alice):
        assert len(run(user_store.search_users("ALI"))) == 1
        assert len(run(user_store.search_users("example"))) == 1
        assert run(user_store.search_users("zed")) == []

    def test_count(self, user_store, alice):
        assert run(user_store.count_users()) == 1


class TestAccountFlows:

    def test_verify(self, user_store, alice):
        verified = run(user_store.verify_user("verify-me"))
        assert verified["isVerified"] is True
        assert verified["verificationToken"] is None
        assert run(user_store.verify_user("verify-me")) is None

    def test_reset_password(self, user_store, alice):
        expiry = datetime.now(timezone.utc) + timedelta(hours=1)
        assert run(user_store.set_password_reset_token("alice@example.com", "tok", expiry))

        updated = run(user_store.reset_password("tok", "new-hash"))
        assert updated["password"] == "new-hash"
        assert updated["resetToken"] is None
        assert updated["resetTokenExpiry"] is None

    def test_expired_token_is_refused(self, user_store, alice):
        expiry = datetime.now(timezone.utc) - timedelta(minutes=1)
        run(user_store.set_password_reset_token("alice@example.com", "tok", expiry))

        assert run(user_store.reset_password("tok", "new-hash")) is None
        assert run(user_store.get_by_id(alice["id"]))["password"] == "hashed"

    def test_reset_token_for_unknown_email(self, user_store):
        expiry = datetime.now(timezone.utc) + timedelta(hours=1)
        assert run(user_store.set_password_reset_token("ghost@example.com", "tok", expiry)) is None


class TestUserUpdateConflicts:

    def test_update_to_taken_email_is_refused(self, user_store, alice):
        bob = run(user_store.create({"username": "bob", "email": "bob@example.com", "password": "x"}))

        with pytest.raises(ValidationFault) as exc_info:
            run(user_store.update(bob["id"], {"email": "ALICE@example.com"}))
        assert exc_info.value.field == "email"
        assert run(user_store.get_by_id(bob["id"]))["email"] == "bob@example.com"

    def test_update_to_own_email_is_allowed(self, user_store, alice):
        updated = run(user_store.update(alice["id"], {"email": "ALICE@EXAMPLE.COM", "username": "al"}))
        assert updated["email"] == "alice@example.com"
        assert updated["username"] == "al"

    def test_update_without_email_skips_check(self, user_store, alice):
        assert run(user_store.update(alice["id"], {"role": "admin"}))["role"] == "admin"

    def test_record_login(self, user_store, alice):
        updated = run(user_store.record_login(alice["id"]))
        assert updated["lastLogin"].endswith("Z")
        assert run(user_store.record_login("nope")) is None
