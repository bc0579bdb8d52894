from datetime import timedelta

from diabetes_app.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_is_salted_and_not_clear_text():
    h1 = hash_password("correct horse")
    h2 = hash_password("correct horse")
    assert h1 != "correct horse"
    assert h1.startswith("$2")
    assert h1 != h2


def test_verify_password():
    h = hash_password("correct horse")
    assert verify_password("correct horse", h) is True
    assert verify_password("wrong horse", h) is False


def test_verify_against_garbage_hash_is_false():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_token_round_trip():
    claims = decode_access_token(create_access_token(42))
    assert claims["sub"] == "42"


def test_expired_token_is_rejected():
    token = create_access_token(42, expires_delta=timedelta(seconds=-5))
    assert decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token(42)
    assert decode_access_token(token[:-2] + "xx") is None
