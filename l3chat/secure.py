"""Verification of base64-wrapped Argon2 password hashes."""

from __future__ import annotations

import base64
import binascii
import hmac
import logging

from cryptography.hazmat.primitives.kdf.argon2 import Argon2id

log = logging.getLogger(__name__)

_DEFAULT_MEMORY = 19456
_DEFAULT_ITERATIONS = 2
_DEFAULT_LANES = 1
_VERSION = 19
_ARGON2_FAMILY = {"argon2id", "argon2i", "argon2d"}


class PasswordHashError(ValueError):
    """The stored hash could not be decoded or parsed."""


def _b64_nopad(text: str, what: str) -> bytes:
    try:
        return base64.b64decode(text + "=" * (-len(text) % 4), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PasswordHashError(f"Failed to parse hash: invalid {what} encoding") from exc


def _parse_params(segment: str) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in segment.split(","):
        key, sep, value = item.partition("=")
        if not sep or not key or not value:
            raise PasswordHashError(f"Failed to parse hash: malformed parameter {item!r}")
        params[key] = value
    return params


def _int_param(params: dict[str, str], key: str, default: int) -> int:
    value = params.get(key)
    if value is None:
        return default
    if not value.isdigit():
        raise PasswordHashError(f"Failed to parse hash: parameter {key} is not a number")
    return int(value)


def _verify_phc(password: str, phc: str) -> bool:
    parts = phc.split("$")
    if len(parts) < 2 or parts[0] != "" or not parts[1]:
        raise PasswordHashError("Failed to parse hash: not a PHC string")
    algorithm, rest = parts[1], parts[2:]

    version = _VERSION
    if rest and rest[0].startswith("v="):
        raw = rest[0][2:]
        if not raw.isdigit():
            raise PasswordHashError("Failed to parse hash: invalid version")
        version = int(raw)
        rest = rest[1:]

    params: dict[str, str] = {}
    if rest and "=" in rest[0]:
        params = _parse_params(rest[0])
        rest = rest[1:]
    if len(rest) > 2:
        raise PasswordHashError("Failed to parse hash: too many fields")

    memory = _int_param(params, "m", _DEFAULT_MEMORY)
    iterations = _int_param(params, "t", _DEFAULT_ITERATIONS)
    lanes = _int_param(params, "p", _DEFAULT_LANES)
    salt = _b64_nopad(rest[0], "salt") if rest else b""
    expected = _b64_nopad(rest[1], "hash") if len(rest) == 2 else b""
    ad = _b64_nopad(params["data"], "data") if "data" in params else None

    if algorithm not in _ARGON2_FAMILY:
        return False
    if algorithm != "argon2id" or version != _VERSION:
        raise PasswordHashError(
            f"Failed to parse hash: unsupported variant {algorithm} v={version}"
        )
    if not expected or set(params) - {"m", "t", "p", "data"}:
        return False

    try:
        kdf = Argon2id(
            salt=salt,
            length=len(expected),
            iterations=iterations,
            lanes=lanes,
            memory_cost=memory,
            ad=ad,
        )
        derived = kdf.derive(password.encode("utf-8"))
    except ValueError:
        return False
    return hmac.compare_digest(derived, expected)


def verify_password(password: str, hash_b64: str) -> bool:
    """Check a password against a base64-encoded Argon2 PHC hash string.

    Returns False on mismatch; raises PasswordHashError if the stored hash is
    not valid base64, not UTF-8, or not a parsable hash.
    """
    log.debug("Attempting to verify password")
    try:
        raw = base64.b64decode(hash_b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PasswordHashError(f"Failed to decode base64: {exc}") from exc
    try:
        phc = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PasswordHashError(f"Failed to convert to string: {exc}") from exc
    return _verify_phc(password, phc)