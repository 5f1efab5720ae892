"""
Tests for password hashing.
"""
from flashcards_api.core.security import hash_password, verify_password


def test_hash_is_salted_bcrypt():
    first = hash_password("s3cret")
    second = hash_password("s3cret")

    assert first.startswith("$2b$10$")
    assert first != second


def test_verify():
    digest = hash_password("s3cret")

    assert verify_password("s3cret", digest)
    assert not verify_password("wrong", digest)
