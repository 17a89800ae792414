from __future__ import annotations

import hashlib
from typing import Any


def derive_seed(base_seed: int, *parts: Any) -> int:
    """Stable per-game seed: the same base seed and parts always give the same value."""
    payload = "|".join([str(base_seed), *(str(part) for part in parts)]).encode("utf-8")
    return int.from_bytes(hashlib.blake2b(payload, digest_size=8).digest(), "big")
