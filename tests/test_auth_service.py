"""Unit tests for auth/service.py and the Authorization Guard in auth/dependencies.py.

Covers:
- signup trimming, normalization, and every validation branch
- duplicate email detection regardless of case/whitespace
- login failure messages identical for unknown email and wrong password
- authenticate() for absent, garbage, and orphaned tokens
"""

import pytest

from auth import service
from auth.dependencies import authenticate, bearer_token
from auth.tokens import create_access_token, decode_access_token
from core.errors import AuthError, ConflictError, ValidationError


class TestSignup:
    def test_scenario_trims_and_normalizes(self, user_store) -> None:
        user, token = service.signup(user_store, "Al", " A@B.com ", "Abcdef1!")
        assert user.name == "Al"
        assert user.email == "a@b.com"
        assert user.id is not None
        assert decode_access_token(token)["user_id"] == user.id
        stored = user_store.get_by_email("a@b.com")
        assert stored is not None
        assert stored.hashed_password != "Abcdef1!"

    def test_name_is_trimmed(self, user_store) -> None:
        user, _ = service.signup(user_store, "  Alice  ", "alice@example.com", "Abcdef1!")
        assert user.name == "Alice"

    def test_public_dict_has_no_hash(self, user_store) -> None:
        user, _ = service.signup(user_store, "Al", "al@example.com", "Abcdef1!")
        assert set(user.public_dict()) == {"id", "name", "email"}

    def test_missing_fields_listed(self, user_store) -> None:
        with pytest.raises(ValidationError) as exc:
            service.signup(user_store, "", None, "Abcdef1!")
        assert exc.value.message == "Please fill in all required fields: name, email"

    def test_short_name_rejected(self, user_store) -> None:
        with pytest.raises(ValidationError, match="at least 2 characters"):
            service.signup(user_store, " A ", "a@b.com", "Abcdef1!")

    def test_whitespace_name_rejected(self, user_store) -> None:
        with pytest.raises(ValidationError, match="Name cannot be empty"):
            service.signup(user_store, "   ", "a@b.com", "Abcdef1!")

    def test_invalid_email_rejected(self, user_store) -> None:
        with pytest.raises(ValidationError, match="@"):
            service.signup(user_store, "Al", "not-an-email", "Abcdef1!")

    @pytest.mark.parametrize("password", ["Abc1!", "abcdef1!", "ABCDEF1!", "Abcdefg!", "Abcdefg1"])
    def test_weak_password_rejected(self, user_store, password: str) -> None:
        with pytest.raises(ValidationError, match="Password must"):
            service.signup(user_store, "Al", "a@b.com", password)
        assert user_store.get_by_email("a@b.com") is None

    @pytest.mark.parametrize("variant", ["a@b.com", "A@B.COM", "  a@B.com", "a@b.com  "])
    def test_duplicate_email_conflicts_across_variants(self, user_store, variant: str) -> None:
        service.signup(user_store, "Al", "a@b.com", "Abcdef1!")
        with pytest.raises(ConflictError) as exc:
            service.signup(user_store, "Bo", variant, "Xyzabc9?")
        assert "already exists" in exc.value.message
        assert exc.value.status_code == 400


class TestLogin:
    @pytest.fixture
    def registered(self, user_store):
        user, _ = service.signup(user_store, "Al", "al@example.com", "Abcdef1!")
        return user

    def test_success_returns_user_and_fresh_token(self, user_store, registered) -> None:
        user, token = service.login(user_store, "al@example.com", "Abcdef1!")
        assert user.id == registered.id
        assert decode_access_token(token)["user_id"] == registered.id

    def test_email_is_normalized(self, user_store, registered) -> None:
        user, _ = service.login(user_store, "  AL@Example.com ", "Abcdef1!")
        assert user.id == registered.id

    def test_wrong_password_and_unknown_email_are_identical(self, user_store, registered) -> None:
        with pytest.raises(AuthError) as wrong_pw:
            service.login(user_store, "al@example.com", "Wrong123!")
        with pytest.raises(AuthError) as unknown:
            service.login(user_store, "nobody@example.com", "Abcdef1!")
        assert wrong_pw.value.message == unknown.value.message == "Invalid email or password."
        assert wrong_pw.value.code == unknown.value.code == "bad_credentials"
        assert wrong_pw.value.status_code == unknown.value.status_code == 401

    def test_missing_fields(self, user_store) -> None:
        with pytest.raises(ValidationError, match="Please provide email and password"):
            service.login(user_store, None, "")

    def test_malformed_email(self, user_store) -> None:
        with pytest.raises(ValidationError, match="valid email"):
            service.login(user_store, "nope", "Abcdef1!")

    def test_old_tokens_stay_valid_after_login(self, user_store, registered) -> None:
        first = create_access_token(registered.id)
        service.login(user_store, "al@example.com", "Abcdef1!")
        assert authenticate(user_store, first).id == registered.id


class TestAuthorizationGuard:
    def test_valid_token_resolves_user(self, user_store) -> None:
        user, token = service.signup(user_store, "Al", "al@example.com", "Abcdef1!")
        assert authenticate(user_store, token).email == "al@example.com"

    @pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
    def test_bad_tokens_rejected(self, user_store, token) -> None:
        with pytest.raises(AuthError):
            authenticate(user_store, token)

    def test_deleted_user_cannot_authenticate(self, user_store) -> None:
        user, token = service.signup(user_store, "Al", "al@example.com", "Abcdef1!")
        assert user_store.delete_user(user.id)
        with pytest.raises(AuthError):
            authenticate(user_store, token)

    @pytest.mark.parametrize(
        "header, expected",
        [
            ("Bearer abc", "abc"),
            ("bearer abc", "abc"),
            ("Bearer   abc  ", "abc"),
            ("Basic abc", None),
            ("Bearer", None),
            ("Bearer ", None),
            ("", None),
            (None, None),
        ],
    )
    def test_bearer_token_parsing(self, header, expected) -> None:
        assert bearer_token(header) == expected
