"""Unit tests for password hashing and strength scoring."""

from src.pf_gateway.auth.password import (
    MAX_PASSWORD_BYTES,
    dummy_verify,
    hash_password,
    password_too_long,
    verify_password,
)
from src.pf_gateway.auth.password_strength import score_password


def test_verify_correct_password():
    hashed = hash_password("MySecret1")
    assert hashed != "MySecret1"
    assert verify_password("MySecret1", hashed) is True


def test_verify_wrong_password():
    hashed = hash_password("MySecret1")
    assert verify_password("WrongPass9", hashed) is False


def test_same_plain_produces_different_hashes():
    # bcrypt uses random salt each time
    assert hash_password("MySecret1") != hash_password("MySecret1")


def test_too_long_counts_bytes_not_chars():
    assert password_too_long("a" * MAX_PASSWORD_BYTES) is False
    assert password_too_long("a" * (MAX_PASSWORD_BYTES + 1)) is True
    # 3 bytes per char in UTF-8
    assert password_too_long("€" * 25) is True


class TestScorePassword:
    def test_short_password_scores_zero(self) -> None:
        assert score_password("Ab1!") == 0

    def test_common_password_scores_zero(self) -> None:
        assert score_password("Password1") == 0

    def test_contains_user_name(self) -> None:
        assert score_password("Alice#2026xyz", ("alice",)) == 1

    def test_few_distinct_characters(self) -> None:
        assert score_password("abababab") == 1

    def test_two_classes(self) -> None:
        assert score_password("horse7battery") == 2

    def test_mixed_classes_are_strong(self) -> None:
        assert score_password("TestPass123!") == 4

    def test_length_bonus(self) -> None:
        assert score_password("correcthorsebatterystaple") == 2

    def test_score_is_bounded(self) -> None:
        assert 0 <= score_password("Aa1!Aa1!Aa1!Aa1!Aa1!Zz9?") <= 4


def test_malformed_stored_hash_is_a_mismatch():
    assert verify_password("MySecret1", "not-a-bcrypt-hash") is False


def test_dummy_verify_returns_nothing():
    assert dummy_verify("anything") is None
