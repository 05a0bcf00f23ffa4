# wechat_kit/services/signing/service.py
"""
Canonical request signing.

All functions here are pure and hold no shared state; they are safe to call
from any number of threads.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import string
from collections.abc import Callable, Mapping
from typing import Any

from wechat_kit.services._shared.errors import SignatureConfigError

SIGN_FIELD = "sign"
NONCE_ALPHABET = string.ascii_letters + string.digits

HashFactory = Callable[[bytes], Any]


def canonical_string(params: Mapping[str, Any], secret_key: str) -> str:
    """
    Build the string that :func:`sign` hashes.

    Keys are sorted by code point, the ``sign`` entry and empty values are
    dropped, and ``key=<secret_key>`` is appended last.

    :param params: Request parameters.
    :param secret_key: Payment key or app secret.
    :raises SignatureConfigError: If ``secret_key`` is empty or no non-empty
        parameter remains once ``sign`` is removed.
    """
    if not secret_key:
        raise SignatureConfigError("Signing requires a non-empty secret key.")
    parts = [
        f"{key}={params[key]}&"
        for key in sorted(params)
        if key != SIGN_FIELD and params[key] is not None and params[key] != ""
    ]
    if not parts:
        raise SignatureConfigError("Signing requires at least one non-empty parameter.")
    parts.append(f"key={secret_key}")
    return "".join(parts)


def sign(
    params: Mapping[str, Any],
    secret_key: str,
    hash_factory: HashFactory = hashlib.md5,
) -> str:
    """
    Sign a parameter set.

    :param params: Request parameters; an entry keyed ``sign`` is ignored.
    :param secret_key: Payment key or app secret.
    :param hash_factory: ``hashlib`` constructor, MD5 by default.
    :returns: Upper-case hex digest.
    :raises SignatureConfigError: On an empty key or parameter set.

    Example
    -------
    ``sign({"b": "2", "a": "1", "sign": "X"}, "KEY")`` hashes
    ``"a=1&b=2&key=KEY"``.
    """
    text = canonical_string(params, secret_key)
    return hash_factory(text.encode("utf-8")).hexdigest().upper()


def verify(
    params: Mapping[str, Any],
    secret_key: str,
    hash_factory: HashFactory = hashlib.md5,
) -> bool:
    """Return ``True`` if ``params["sign"]`` matches the recomputed signature."""
    provided = str(params.get(SIGN_FIELD) or "")
    if not provided:
        return False
    expected = sign(params, secret_key, hash_factory)
    return hmac.compare_digest(expected, provided.upper())


def md5_sum(text: str) -> str:
    """Upper-case hex MD5 of ``text``."""
    return hashlib.md5(text.encode("utf-8")).hexdigest().upper()


def sha1_signature(text: str) -> str:
    """Lower-case hex SHA-1 of ``text``."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def random_str(length: int) -> str:
    """Return a random alphanumeric nonce of ``length`` characters."""
    return "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))
