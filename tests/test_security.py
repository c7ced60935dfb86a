"""Unit tests for app.core.security: bcrypt hashing and JWT issue/verify."""

import unittest
from datetime import timedelta
from unittest.mock import patch

import jwt
from pydantic import SecretStr

from app.core.config import settings
from app.core.errors import CredentialError, TokenExpired, TokenInvalid
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    token_claims_for,
    verify_password,
)
from app.models import User

FAST_ROUNDS = 4


def _claims() -> dict:
    return {"sub": "7", "userId": 7, "username": "ada", "email": "ada@example.com", "role": "user"}


class TestHashPassword(unittest.TestCase):
    """hash_password salts every call; verify_password checks in constant time."""

    def test_digest_is_not_plaintext(self) -> None:
        digest = hash_password("secret123", rounds=FAST_ROUNDS)
        self.assertNotEqual(digest, "secret123")
        self.assertTrue(digest.startswith("$2"))

    def test_same_plaintext_gives_different_digests(self) -> None:
        a = hash_password("secret123", rounds=FAST_ROUNDS)
        b = hash_password("secret123", rounds=FAST_ROUNDS)
        self.assertNotEqual(a, b)

    def test_rounds_default_to_settings(self) -> None:
        with patch.object(settings, "BCRYPT_ROUNDS", 5):
            digest = hash_password("secret123")
        self.assertIn("$05$", digest)

    def test_verify_round_trip(self) -> None:
        for plain in ("secret123", "pässwörd", "x" * 100):
            digest = hash_password(plain, rounds=FAST_ROUNDS)
            self.assertTrue(verify_password(plain, digest))

    def test_verify_rejects_other_plaintext(self) -> None:
        digest = hash_password("secret123", rounds=FAST_ROUNDS)
        self.assertFalse(verify_password("secret124", digest))
        self.assertFalse(verify_password("", digest))

    def test_verify_rejects_mutated_digest(self) -> None:
        digest = hash_password("secret123", rounds=FAST_ROUNDS)
        # Position 40 is inside the checksum part ($2b$04$ + 22 salt chars + 31 hash chars).
        swapped = "a" if digest[40] != "a" else "b"
        mutated = digest[:40] + swapped + digest[41:]
        self.assertFalse(verify_password("secret123", mutated))

    def test_malformed_digest_raises_credential_error(self) -> None:
        with self.assertRaises(CredentialError):
            verify_password("secret123", "not-a-bcrypt-hash")


class TestAccessTokens(unittest.TestCase):
    """create_access_token / decode_access_token."""

    def test_round_trip_returns_claims(self) -> None:
        token = create_access_token(_claims())
        payload = decode_access_token(token)
        for key, value in _claims().items():
            self.assertEqual(payload[key], value)
        self.assertIn("iat", payload)
        self.assertIn("exp", payload)

    def test_default_lifetime_from_settings(self) -> None:
        payload = decode_access_token(create_access_token(_claims()))
        self.assertEqual(payload["exp"] - payload["iat"], settings.JWT_EXPIRE_MINUTES * 60)

    def test_verification_is_idempotent(self) -> None:
        token = create_access_token(_claims())
        self.assertEqual(decode_access_token(token), decode_access_token(token))

    def test_expired_token_raises_token_expired(self) -> None:
        token = create_access_token(_claims(), expires_delta=timedelta(seconds=-1))
        with self.assertRaises(TokenExpired):
            decode_access_token(token)

    def test_wrong_secret_raises_token_invalid(self) -> None:
        token = create_access_token(_claims())
        with patch.object(settings, "JWT_SECRET", SecretStr("another-secret")):
            with self.assertRaises(TokenInvalid):
                decode_access_token(token)

    def test_garbage_raises_token_invalid(self) -> None:
        with self.assertRaises(TokenInvalid):
            decode_access_token("not.a.jwt")

    def test_token_without_sub_is_invalid(self) -> None:
        token = jwt.encode(
            {"username": "ada", "exp": 9999999999, "iat": 0},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(TokenInvalid):
            decode_access_token(token)

    def test_token_claims_for_user(self) -> None:
        user = User(id=3, username="ada", email="ada@example.com", role="admin")
        self.assertEqual(
            token_claims_for(user),
            {"sub": "3", "userId": 3, "username": "ada", "email": "ada@example.com", "role": "admin"},
        )


if __name__ == "__main__":
    unittest.main()
