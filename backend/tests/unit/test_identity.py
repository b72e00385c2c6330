"""Unit tests for bearer token decoding and caller capabilities."""

from datetime import timedelta

import pytest
from jose import jwt

from app.domain.entities import ROLE_ADMIN, ROLE_EDITOR, AccountStatus, Caller
from app.domain.exceptions import ForbiddenError
from app.infrastructure.security import create_access_token, decode_caller

SECRET = "unit-test-secret"
ALGORITHM = "HS256"


def test_round_trip_token_yields_caller():
    token = create_access_token("user-1", SECRET, ALGORITHM, roles=[ROLE_EDITOR])

    caller = decode_caller(token, SECRET, ALGORITHM)

    assert caller == Caller(id="user-1", roles=frozenset({ROLE_EDITOR}), status=AccountStatus.APPROVED)


def test_wrong_secret_is_rejected():
    token = create_access_token("user-1", SECRET, ALGORITHM)
    assert decode_caller(token, "other-secret", ALGORITHM) is None


def test_expired_token_is_rejected():
    token = create_access_token("user-1", SECRET, ALGORITHM, expires_delta=timedelta(seconds=-5))
    assert decode_caller(token, SECRET, ALGORITHM) is None


def test_token_without_subject_is_rejected():
    token = jwt.encode({"roles": [ROLE_ADMIN]}, SECRET, algorithm=ALGORITHM)
    assert decode_caller(token, SECRET, ALGORITHM) is None


def test_missing_status_claim_means_pending():
    token = jwt.encode({"sub": "user-2", "roles": [ROLE_ADMIN]}, SECRET, algorithm=ALGORITHM)
    caller = decode_caller(token, SECRET, ALGORITHM)
    assert caller.status == AccountStatus.PENDING
    assert caller.is_admin is False


def test_unknown_status_is_rejected():
    token = jwt.encode({"sub": "user-3", "status": "banned"}, SECRET, algorithm=ALGORITHM)
    assert decode_caller(token, SECRET, ALGORITHM) is None


def test_require_any_role_checks_approval_first():
    pending_admin = Caller(id="u", roles=frozenset({ROLE_ADMIN}), status=AccountStatus.PENDING)
    with pytest.raises(ForbiddenError):
        pending_admin.require_admin()


def test_require_any_role_accepts_any_listed_role():
    editor = Caller(id="u", roles=frozenset({ROLE_EDITOR}))
    editor.require_any_role(ROLE_ADMIN, ROLE_EDITOR)
    with pytest.raises(ForbiddenError):
        editor.require_admin()
