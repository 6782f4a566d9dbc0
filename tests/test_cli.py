"""
tests/test_cli.py -- Tests for the command-line client in main.py.

The HTTP layer is replaced with unittest.mock so no server is needed.
Covers local validation, session persistence, the logged-out guard and
session clearing on 401.
"""

from __future__ import annotations

import os
import stat
from unittest.mock import MagicMock

import pytest

import main as cli
from client.api import ApiClient, ApiError
from client.session import SessionFile

_USER = {"id": 7, "name": "Al", "email": "al@example.com"}
_PRODUCT = {
    "id": 3,
    "name": "Pen",
    "description": "Blue pen",
    "price": 1.5,
    "category": "Other",
    "imageUrl": "https://via.placeholder.com/300",
    "owner": 7,
    "createdAt": "2026-01-01T00:00:00+00:00",
    "updatedAt": "2026-01-01T00:00:00+00:00",
}


@pytest.fixture
def session_path(tmp_path):
    return tmp_path / "session.json"


@pytest.fixture
def logged_in(session_path):
    SessionFile(session_path).save("stored-token", _USER)
    return session_path


def _run(session_path, *argv: str) -> int:
    return cli.main(["--session", str(session_path), *argv])


class TestSignupAndLogin:
    def test_signup_rejects_weak_password_without_request(self, session_path, monkeypatch, capsys) -> None:
        signup = MagicMock()
        monkeypatch.setattr(ApiClient, "signup", signup)
        rc = _run(session_path, "signup", "--name", "Al", "--email", "al@example.com", "--password", "weak")
        assert rc == 1
        signup.assert_not_called()
        assert "at least 8 characters" in capsys.readouterr().err

    def test_signup_saves_session(self, session_path, monkeypatch) -> None:
        monkeypatch.setattr(ApiClient, "signup", MagicMock(return_value={"token": "t1", "user": _USER}))
        rc = _run(session_path, "signup", "--name", "Al", "--email", "al@example.com", "--password", "Abcdef1!")
        assert rc == 0
        assert SessionFile(session_path).load() == {"token": "t1", "user": _USER}

    def test_login_saves_session(self, session_path, monkeypatch, capsys) -> None:
        login = MagicMock(return_value={"token": "t2", "user": _USER})
        monkeypatch.setattr(ApiClient, "login", login)
        rc = _run(session_path, "login", "--email", "al@example.com", "--password", "Abcdef1!")
        assert rc == 0
        login.assert_called_once_with("al@example.com", "Abcdef1!")
        assert SessionFile(session_path).load()["token"] == "t2"
        assert "Logged in as al@example.com" in capsys.readouterr().out

    def test_login_failure_shows_server_message(self, session_path, monkeypatch, capsys) -> None:
        monkeypatch.setattr(ApiClient, "login", MagicMock(side_effect=ApiError(401, "Invalid email or password.")))
        rc = _run(session_path, "login", "--email", "al@example.com", "--password", "Wrong123!")
        assert rc == 1
        assert "Invalid email or password." in capsys.readouterr().err
        assert SessionFile(session_path).load() is None

    def test_login_rejects_malformed_email_locally(self, session_path, monkeypatch) -> None:
        login = MagicMock()
        monkeypatch.setattr(ApiClient, "login", login)
        assert _run(session_path, "login", "--email", "nope", "--password", "Abcdef1!") == 1
        login.assert_not_called()


class TestSessionGuard:
    def test_list_without_session_fails(self, session_path, monkeypatch, capsys) -> None:
        list_products = MagicMock()
        monkeypatch.setattr(ApiClient, "list_products", list_products)
        assert _run(session_path, "list") == 1
        list_products.assert_not_called()
        assert "not logged in" in capsys.readouterr().err

    def test_stored_token_is_sent(self, logged_in, monkeypatch, capsys) -> None:
        seen = {}

        def fake_list(self):
            seen["token"] = self.token
            return {"success": True, "count": 1, "products": [_PRODUCT]}

        monkeypatch.setattr(ApiClient, "list_products", fake_list)
        assert _run(logged_in, "list") == 0
        assert seen["token"] == "stored-token"
        out = capsys.readouterr().out
        assert "My Products (1)" in out
        assert "$1.50" in out

    def test_401_clears_session(self, logged_in, monkeypatch, capsys) -> None:
        monkeypatch.setattr(ApiClient, "me", MagicMock(side_effect=ApiError(401, "Not authorized, please log in.")))
        assert _run(logged_in, "whoami") == 1
        assert "session has expired" in capsys.readouterr().err
        assert not logged_in.exists()

    def test_403_keeps_session(self, logged_in, monkeypatch, capsys) -> None:
        monkeypatch.setattr(
            ApiClient,
            "get_product",
            MagicMock(side_effect=ApiError(403, "Not authorized to access this product")),
        )
        assert _run(logged_in, "show", "3") == 1
        assert "Not authorized to access this product" in capsys.readouterr().err
        assert SessionFile(logged_in).load() is not None

    def test_logout_clears_session(self, logged_in) -> None:
        assert _run(logged_in, "logout") == 0
        assert not logged_in.exists()


class TestProductCommands:
    def test_add_sends_camel_case_fields(self, logged_in, monkeypatch) -> None:
        create = MagicMock(return_value={"product": _PRODUCT})
        monkeypatch.setattr(ApiClient, "create_product", create)
        rc = _run(
            logged_in,
            "add",
            "--name", "Pen",
            "--description", "Blue pen",
            "--price", "1.5",
            "--category", "Other",
            "--image-url", "https://img.example.com/pen.png",
        )
        assert rc == 0
        create.assert_called_once_with(
            {
                "name": "Pen",
                "description": "Blue pen",
                "price": 1.5,
                "category": "Other",
                "imageUrl": "https://img.example.com/pen.png",
            }
        )

    @pytest.mark.parametrize("price", ["0", "-2", "abc", "nan"])
    def test_add_rejects_bad_price_locally(self, logged_in, monkeypatch, price: str) -> None:
        create = MagicMock()
        monkeypatch.setattr(ApiClient, "create_product", create)
        rc = _run(logged_in, "add", "--name", "Pen", "--description", "d", "--price", price, "--category", "Other")
        assert rc == 1
        create.assert_not_called()

    def test_edit_sends_only_given_fields(self, logged_in, monkeypatch) -> None:
        update = MagicMock(return_value={"product": _PRODUCT})
        monkeypatch.setattr(ApiClient, "update_product", update)
        assert _run(logged_in, "edit", "3", "--price", "2.25") == 0
        update.assert_called_once_with(3, {"price": 2.25})

    def test_edit_without_fields_fails(self, logged_in, monkeypatch) -> None:
        update = MagicMock()
        monkeypatch.setattr(ApiClient, "update_product", update)
        assert _run(logged_in, "edit", "3") == 1
        update.assert_not_called()

    def test_delete(self, logged_in, monkeypatch, capsys) -> None:
        delete = MagicMock(return_value={"success": True})
        monkeypatch.setattr(ApiClient, "delete_product", delete)
        assert _run(logged_in, "delete", "3") == 0
        delete.assert_called_once_with(3)
        assert "Deleted product #3" in capsys.readouterr().out


class TestCheckPassword:
    def test_strong_password(self, session_path, capsys) -> None:
        assert _run(session_path, "check-password", "Abcdef1!") == 0
        assert "meets all requirements" in capsys.readouterr().out

    def test_weak_password(self, session_path, capsys) -> None:
        assert _run(session_path, "check-password", "abcdefgh") == 1
        out = capsys.readouterr().out
        assert "[ ] One uppercase letter" in out
        assert "[x] At least 8 characters" in out


class TestSessionFile:
    def test_file_is_created_owner_only(self, session_path, monkeypatch) -> None:
        old_umask = os.umask(0)
        # Only the mode given at creation counts; a later chmod would leave a window.
        monkeypatch.setattr(os, "chmod", lambda *args, **kwargs: None)
        try:
            SessionFile(session_path).save("t", _USER)
        finally:
            os.umask(old_umask)
        assert stat.S_IMODE(session_path.stat().st_mode) == 0o600

    def test_existing_file_is_tightened(self, session_path) -> None:
        session_path.write_text("{}", encoding="utf-8")
        session_path.chmod(0o644)
        SessionFile(session_path).save("t", _USER)
        assert stat.S_IMODE(session_path.stat().st_mode) == 0o600
        assert SessionFile(session_path).load() == {"token": "t", "user": _USER}

    def test_corrupt_file_reads_as_logged_out(self, session_path) -> None:
        session_path.write_text("not json", encoding="utf-8")
        assert SessionFile(session_path).load() is None
