"""MD5 helpers for content fingerprints.

Used by the strict cell comparator to decide whether two outputs carry the
same payload, and by the HTTP source to derive a change signal when the
server sends neither ``ETag`` nor ``Last-Modified``.  They are **not** used
for security purposes.
"""

from __future__ import annotations

import hashlib
import json


def md5_hash(data: str | bytes) -> str:
    """Return the hex-encoded MD5 digest of *data*.

    Strings are encoded as UTF-8 before hashing.

    Examples
    --------
    >>> md5_hash("hello")
    '5d41402abc4b2a76b9719d911017c592'
    >>> md5_hash(b"hello") == md5_hash("hello")
    True
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.md5(data).hexdigest()


def hash_dict(d: dict) -> str:
    """Return the hex-encoded MD5 of a JSON-serialized dict.

    Keys are sorted and ``ensure_ascii=False`` is used so the digest is
    deterministic and Unicode-preserving.

    Examples
    --------
    >>> hash_dict({"b": 2, "a": 1}) == hash_dict({"a": 1, "b": 2})
    True
    """
    return md5_hash(json.dumps(d, sort_keys=True, ensure_ascii=False))
