"""Tests for bearer-token verification and role gating."""

from __future__ import annotations

import jwt
import pytest  # type: ignore
from fastapi import HTTPException

import auth
from auth import create_access_token, get_current_identity, require_role, verify_token


def test_token_round_trip() -> None:
    identity = verify_token(create_access_token("u1", "acme", "admin"))
    assert identity.user_id == "u1"
    assert identity.company_id == "acme"
    assert identity.role == "admin"


def test_expired_token_is_rejected() -> None:
    token = create_access_token("u1", "acme", "admin", expires_minutes=-1)
    with pytest.raises(HTTPException) as exc:
        get_current_identity(f"Bearer {token}")
    assert exc.value.status_code == 401
    assert exc.value.detail == "Invalid or expired token"


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = jwt.encode({"userId": "u1", "companyId": "acme", "role": "admin"}, "another-secret-that-is-long-enough-for-hs256", algorithm="HS256")
    with pytest.raises(HTTPException) as exc:
        get_current_identity(f"Bearer {token}")
    assert exc.value.status_code == 401


def test_token_without_company_is_rejected() -> None:
    token = jwt.encode({"userId": "u1", "role": "admin"}, auth.JWT_SECRET, algorithm=auth.JWT_ALGORITHM)
    with pytest.raises(HTTPException) as exc:
        get_current_identity(f"Bearer {token}")
    assert exc.value.detail == "Invalid or expired token"


@pytest.mark.parametrize("header", [None, "", "Token abc", "Basic dXNlcg=="])
def test_missing_or_malformed_header(header) -> None:
    with pytest.raises(HTTPException) as exc:
        get_current_identity(header)
    assert exc.value.status_code == 401
    assert exc.value.detail == "Unauthorized"


def test_require_role() -> None:
    checker = require_role("admin")
    admin = verify_token(create_access_token("u1", "acme", "admin"))
    recruiter = verify_token(create_access_token("u2", "acme", "recruiter"))
    no_role = verify_token(create_access_token("u3", "acme", ""))

    assert checker(admin) is admin

    with pytest.raises(HTTPException) as exc:
        checker(recruiter)
    assert exc.value.status_code == 403

    with pytest.raises(HTTPException) as exc:
        checker(no_role)
    assert exc.value.status_code == 401
