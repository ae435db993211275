"""Demo: share one slow generator between several consumers through a lazy cache."""

from __future__ import annotations

import sys
import time
from collections.abc import Iterator
from itertools import islice
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sharedcode.enums.labels import label_of  # noqa: E402
from sharedcode.lazy.cache import wrap  # noqa: E402
from sharedcode.security.hasher import HashType, compute_hash  # noqa: E402


def _slow_digests(words: list[str]) -> Iterator[tuple[str, str]]:
    """Yield (word, digest) pairs, pretending each one is expensive."""
    for word in words:
        print(f"  producing {word!r}")
        time.sleep(0.05)
        yield word, compute_hash(word, HashType.SHA256)


def main() -> int:
    """Traverse a cached generator several times and show it only runs once."""
    words = ["alpha", "beta", "gamma", "delta"]
    print(f"digest algorithm: {label_of(HashType.SHA256)}")
    cached = wrap(_slow_digests(words))

    print("first two:")
    for word, digest in islice(cached, 2):
        print(f"  {word}: {digest[:16]}")

    print("full pass:")
    for word, digest in cached:
        print(f"  {word}: {digest[:16]}")

    print("second full pass (no production):")
    for word, digest in cached:
        print(f"  {word}: {digest[:16]}")

    print(f"materialized: {cached.materialized_count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
