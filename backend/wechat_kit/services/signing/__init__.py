"""Signature engine: sorted-key canonicalization and hashing helpers."""

from .service import canonical_string, md5_sum, random_str, sha1_signature, sign, verify

__all__ = ["canonical_string", "md5_sum", "random_str", "sha1_signature", "sign", "verify"]
