"""
Tests for the credential helpers in utils.security.
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from argon2 import PasswordHasher

from utils.exceptions import AuthError, AuthFailure, ConfigError, ForbiddenError
from utils.security import (
    ACCESS_TOKEN_TTL,
    access_token_ttl,
    api_key_matches,
    ensure_owner,
    extract_api_key,
    extract_bearer_token,
    hash_password,
    issue_access_token,
    issue_refresh_token,
    password_needs_rehash,
    validate_access_token,
    verify_dummy_password,
    verify_password,
)

SECRET = "unit-test-secret-0123456789abcdef0123456789"


class TestPasswordHashing:
    def test_hash_then_verify(self):
        stored = hash_password("secret1")
        assert stored != "secret1"
        assert verify_password("secret1", stored) is True

    def test_wrong_password_fails(self):
        stored = hash_password("secret1")
        assert verify_password("secret2", stored) is False
        assert verify_password("", stored) is False

    def test_hashes_are_salted(self):
        first = hash_password("same-password")
        second = hash_password("same-password")
        assert first != second
        assert verify_password("same-password", first)
        assert verify_password("same-password", second)

    def test_malformed_stored_hash_is_a_mismatch(self):
        assert verify_password("secret1", "not-a-hash") is False

    def test_needs_rehash_when_parameters_change(self):
        old = PasswordHasher(time_cost=2, memory_cost=2048, parallelism=1).hash("secret1")
        assert password_needs_rehash(old) is True
        assert password_needs_rehash(hash_password("secret1")) is False

    def test_dummy_verification_always_fails(self):
        assert verify_dummy_password("anything") is False


class TestAccessTokens:
    def test_issue_and_validate(self):
        user_id = uuid.uuid4()
        token = issue_access_token(user_id, SECRET, timedelta(minutes=15))
        assert validate_access_token(token, SECRET) == str(user_id)

    def test_claims(self):
        user_id = uuid.uuid4()
        now = datetime.now(timezone.utc)
        token = issue_access_token(user_id, SECRET, timedelta(minutes=15), now=now)
        claims = jwt.decode(token, options={"verify_signature": False})
        assert claims["iss"] == "chirpy"
        assert claims["sub"] == str(user_id)
        assert claims["iat"] == int(now.timestamp())
        assert claims["exp"] - claims["iat"] == 15 * 60
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_empty_secret_is_a_config_error(self):
        with pytest.raises(ConfigError):
            issue_access_token(uuid.uuid4(), "", timedelta(minutes=15))
        with pytest.raises(ConfigError):
            validate_access_token("whatever", "")

    def test_expired_token(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = issue_access_token(uuid.uuid4(), SECRET, timedelta(hours=1), now=issued)
        with pytest.raises(AuthError) as exc:
            validate_access_token(token, SECRET)
        assert exc.value.reason is AuthFailure.EXPIRED

    def test_negative_ttl_is_already_expired(self):
        token = issue_access_token(uuid.uuid4(), SECRET, -timedelta(minutes=1))
        with pytest.raises(AuthError) as exc:
            validate_access_token(token, SECRET)
        assert exc.value.reason is AuthFailure.EXPIRED

    def test_wrong_secret(self):
        token = issue_access_token(uuid.uuid4(), SECRET, timedelta(minutes=15))
        with pytest.raises(AuthError) as exc:
            validate_access_token(token, SECRET + "-other")
        assert exc.value.reason is AuthFailure.INVALID_SIGNATURE

    def test_other_hmac_algorithm_rejected(self):
        now = datetime.now(timezone.utc)
        payload = {
            "iss": "chirpy",
            "sub": str(uuid.uuid4()),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=5)).timestamp()),
        }
        token = jwt.encode(payload, SECRET, algorithm="HS512")
        with pytest.raises(AuthError) as exc:
            validate_access_token(token, SECRET)
        assert exc.value.reason is AuthFailure.INVALID_ALGORITHM

    def test_unsigned_token_rejected(self):
        now = datetime.now(timezone.utc)
        payload = {
            "iss": "chirpy",
            "sub": str(uuid.uuid4()),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=5)).timestamp()),
        }
        token = jwt.encode(payload, None, algorithm="none")
        with pytest.raises(AuthError) as exc:
            validate_access_token(token, SECRET)
        assert exc.value.reason is AuthFailure.INVALID_ALGORITHM

    def test_subject_must_be_a_uuid(self):
        now = datetime.now(timezone.utc)
        payload = {
            "iss": "chirpy",
            "sub": "walt",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=5)).timestamp()),
        }
        token = jwt.encode(payload, SECRET, algorithm="HS256")
        with pytest.raises(AuthError) as exc:
            validate_access_token(token, SECRET)
        assert exc.value.reason is AuthFailure.MALFORMED_SUBJECT

    def test_garbage_token(self):
        with pytest.raises(AuthError) as exc:
            validate_access_token("not.a.jwt", SECRET)
        assert exc.value.reason is AuthFailure.MALFORMED_TOKEN

    def test_public_message_does_not_leak_reason(self):
        expired = issue_access_token(
            uuid.uuid4(), SECRET, timedelta(hours=1),
            now=datetime.now(timezone.utc) - timedelta(hours=2),
        )
        forged = issue_access_token(uuid.uuid4(), "another-secret-0123456789abcdef0123456789", timedelta(hours=1))
        errors = []
        for token in (expired, forged):
            with pytest.raises(AuthError) as exc:
                validate_access_token(token, SECRET)
            errors.append(exc.value)
        assert errors[0].reason != errors[1].reason
        assert errors[0].public_message == errors[1].public_message == "Unauthorized"


class TestAccessTokenTTL:
    @pytest.mark.parametrize("requested, expected", [
        (7200, timedelta(hours=1)),
        (3600, timedelta(hours=1)),
        (60, timedelta(seconds=60)),
        (0, timedelta(hours=1)),
        (-30, timedelta(hours=1)),
        (None, timedelta(hours=1)),
        (10**18, timedelta(hours=1)),
    ])
    def test_clamp(self, requested, expected):
        assert access_token_ttl(requested) == expected

    def test_default_is_one_hour(self):
        assert ACCESS_TOKEN_TTL == timedelta(hours=1)


class TestRefreshTokenGeneration:
    def test_random_hex_of_256_bits(self):
        token = issue_refresh_token()
        assert len(token) == 64
        int(token, 16)

    def test_unique(self):
        assert len({issue_refresh_token() for _ in range(50)}) == 50


class TestHeaderExtraction:
    def test_bearer_token(self):
        assert extract_bearer_token({"Authorization": "Bearer abc"}) == "abc"

    def test_bearer_token_is_trimmed(self):
        assert extract_bearer_token({"Authorization": "Bearer  abc  "}) == "abc"

    def test_missing_header(self):
        with pytest.raises(AuthError) as exc:
            extract_bearer_token({})
        assert exc.value.reason is AuthFailure.MISSING_HEADER

    @pytest.mark.parametrize("value", ["Token abc", "bearer abc", "Bearerabc", "ApiKey abc"])
    def test_bad_prefix(self, value):
        with pytest.raises(AuthError) as exc:
            extract_bearer_token({"Authorization": value})
        assert exc.value.reason is AuthFailure.BAD_PREFIX

    @pytest.mark.parametrize("value", ["Bearer ", "Bearer   "])
    def test_empty_token(self, value):
        with pytest.raises(AuthError) as exc:
            extract_bearer_token({"Authorization": value})
        assert exc.value.reason is AuthFailure.EMPTY_TOKEN

    def test_api_key(self):
        assert extract_api_key({"Authorization": "ApiKey f271c81f"}) == "f271c81f"

    def test_api_key_variants(self):
        with pytest.raises(AuthError) as exc:
            extract_api_key({})
        assert exc.value.reason is AuthFailure.MISSING_HEADER
        with pytest.raises(AuthError) as exc:
            extract_api_key({"Authorization": "Bearer f271c81f"})
        assert exc.value.reason is AuthFailure.BAD_PREFIX
        with pytest.raises(AuthError) as exc:
            extract_api_key({"Authorization": "ApiKey   "})
        assert exc.value.reason is AuthFailure.EMPTY_TOKEN

    def test_api_key_matches(self):
        assert api_key_matches("f271c81f", "f271c81f")
        assert not api_key_matches("f271c81f", "f271c81e")
        assert not api_key_matches("f271c81f", "")
        assert not api_key_matches("", "")


class TestOwnership:
    def test_owner_passes(self):
        user_id = str(uuid.uuid4())
        ensure_owner(user_id, uuid.UUID(user_id))

    def test_other_user_forbidden(self):
        with pytest.raises(ForbiddenError):
            ensure_owner(str(uuid.uuid4()), str(uuid.uuid4()))
