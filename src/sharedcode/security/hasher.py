"""Hex digest helper with the algorithm chosen through a labeled enum."""

from __future__ import annotations

import hashlib
from enum import Enum, auto

from sharedcode.enums.labels import EnumLabelRegistry, label_of, string_values


@string_values(
    MD5="md5",
    SHA1="sha1",
    SHA224="sha224",
    SHA256="sha256",
    SHA384="sha384",
    SHA512="sha512",
    SHA3_256="sha3_256",
    SHA3_512="sha3_512",
    BLAKE2B="blake2b",
    BLAKE2S="blake2s",
)
class HashType(Enum):
    """Supported digests; each member's label is its ``hashlib`` algorithm name."""

    MD5 = auto()
    SHA1 = auto()
    SHA224 = auto()
    SHA256 = auto()
    SHA384 = auto()
    SHA512 = auto()
    SHA3_256 = auto()
    SHA3_512 = auto()
    BLAKE2B = auto()
    BLAKE2S = auto()


def compute_hash(
    text: str,
    hash_type: HashType,
    encoding: str = "utf-8",
    registry: EnumLabelRegistry | None = None,
) -> str:
    """Return the lowercase hex digest of ``text`` encoded with ``encoding``."""
    algorithm = label_of(hash_type, registry)
    if algorithm is None:
        raise ValueError(f"{hash_type} has no declared hashlib algorithm")
    digest = hashlib.new(algorithm)
    digest.update(text.encode(encoding))
    return digest.hexdigest()
