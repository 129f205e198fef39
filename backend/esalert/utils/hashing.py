"""Hashing helpers."""

import hashlib
from collections.abc import Sequence


def stable_hash(value: str) -> str:
    """Compute deterministic sha256 hash for string."""

    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def dedup_key_for(ids: Sequence[str]) -> str:
    """Build dedup key from matched document ids.

    Ids are concatenated in the given order without a separator, so the key is
    order sensitive. Callers wanting set semantics must sort upstream.
    """

    return stable_hash("".join(ids))
