import base64

import pytest
from cryptography.hazmat.primitives.kdf.argon2 import Argon2id

from l3chat.secure import PasswordHashError, verify_password

SALT = b"saltsalt1234"


def _nopad(data: bytes) -> str:
    return base64.b64encode(data).decode().rstrip("=")


def _stored_hash(password: str, algorithm: str = "argon2id", version: int = 19) -> str:
    digest = Argon2id(
        salt=SALT, length=32, iterations=1, lanes=1, memory_cost=64
    ).derive(password.encode())
    phc = f"${algorithm}$v={version}$m=64,t=1,p=1${_nopad(SALT)}${_nopad(digest)}"
    return base64.b64encode(phc.encode()).decode()


def test_correct_password_verifies():
    password = "password"
    assert verify_password(password, _stored_hash(password)) is True


def test_wrong_password_rejected():
    password = "password"
    assert verify_password("secret", _stored_hash(password)) is False


def test_tampered_hash_rejected():
    password = "password"
    phc = base64.b64decode(_stored_hash(password)).decode()
    tampered = phc.replace("t=1", "t=2")
    assert verify_password(password, base64.b64encode(tampered.encode()).decode()) is False


def test_invalid_base64_raises():
    with pytest.raises(PasswordHashError, match="Failed to decode base64"):
        verify_password("password", "!!!not base64!!!")


def test_non_utf8_raises():
    wrapped = base64.b64encode(b"\xff\xfe\xfd").decode()
    with pytest.raises(PasswordHashError, match="Failed to convert to string"):
        verify_password("password", wrapped)


def test_unparsable_hash_raises():
    wrapped = base64.b64encode(b"not a hash").decode()
    with pytest.raises(PasswordHashError, match="Failed to parse hash"):
        verify_password("password", wrapped)


def test_unsupported_variant_raises():
    password = "password"
    with pytest.raises(PasswordHashError):
        verify_password(password, _stored_hash(password, algorithm="argon2i"))


def test_unknown_algorithm_does_not_verify():
    password = "password"
    assert verify_password(password, _stored_hash(password, algorithm="scrypt")) is False