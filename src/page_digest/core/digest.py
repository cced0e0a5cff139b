from __future__ import annotations

import hashlib
import logging
import secrets
from typing import Mapping

from page_digest.core.errors import EntropyError, HashComputeError

logger = logging.getLogger(__name__)

SALT_SIZE = 16
DERIVED_KEY_SIZE = 32
PBKDF2_ITERATIONS = 10_000

SHA3_KEY = "sha3-256"
BLAKE2B_KEY = "blake2b-256"
PBKDF2_KEY = "pbkdf2-sha3"
SALT_KEY = "salt"

DigestSet = dict[str, str]


def sha3_256_hex(text: str) -> str:
    return hashlib.sha3_256(text.encode("utf-8")).hexdigest()


def blake2b_256_hex(text: str) -> str:
    # Unkeyed BLAKE2b truncated by parameter block to 32 bytes, not a prefix of BLAKE2b-512.
    return hashlib.blake2b(text.encode("utf-8"), digest_size=32).hexdigest()


def _new_salt() -> bytes:
    try:
        return secrets.token_bytes(SALT_SIZE)
    except (OSError, NotImplementedError) as e:
        raise EntropyError(f"failed to generate salt: {e}") from e


class DigestEngine:
    """Computes the digest set for page titles.

    Each engine draws one random salt at construction and uses it for every
    key derivation it performs, so derived values from the same engine are
    comparable. Pass ``salt`` to rebuild an engine from a previously
    published salt.
    """

    def __init__(self, *, iterations: int = PBKDF2_ITERATIONS, salt: bytes | None = None) -> None:
        if iterations < 1:
            raise ValueError("iterations must be >= 1")
        if salt is None:
            salt = _new_salt()
        elif len(salt) != SALT_SIZE:
            raise ValueError(f"salt must be {SALT_SIZE} bytes, got {len(salt)}")
        self._salt = bytes(salt)
        self._iterations = int(iterations)

    @classmethod
    def from_salt_hex(cls, salt_hex: str, *, iterations: int = PBKDF2_ITERATIONS) -> "DigestEngine":
        return cls(iterations=iterations, salt=bytes.fromhex(salt_hex))

    @property
    def salt(self) -> bytes:
        return self._salt

    @property
    def salt_hex(self) -> str:
        return self._salt.hex()

    @property
    def iterations(self) -> int:
        return self._iterations

    def derive_key(self, text: str) -> str:
        try:
            key = hashlib.pbkdf2_hmac(
                "sha3_256",
                text.encode("utf-8"),
                self._salt,
                self._iterations,
                dklen=DERIVED_KEY_SIZE,
            )
        except (ValueError, TypeError) as e:
            raise HashComputeError(f"pbkdf2 over sha3_256 unavailable: {e}") from e
        return key.hex()

    def hash_title(self, text: str) -> DigestSet:
        try:
            sha3 = sha3_256_hex(text)
            blake = blake2b_256_hex(text)
        except (ValueError, TypeError) as e:
            raise HashComputeError(f"failed to hash title: {e}") from e
        return {
            SHA3_KEY: sha3,
            BLAKE2B_KEY: blake,
            PBKDF2_KEY: self.derive_key(text),
            SALT_KEY: self.salt_hex,
        }

    def validate_integrity(self, content: str, expected_hex_digest: str) -> bool:
        # Integrity of public content, not authentication: plain comparison is enough.
        return blake2b_256_hex(content) == expected_hex_digest

    def verify_derivation(self, text: str, digests: Mapping[str, str]) -> bool:
        """Re-derive the PBKDF2 value for ``text`` using the salt recorded in ``digests``."""

        salt_hex = digests.get(SALT_KEY)
        expected = digests.get(PBKDF2_KEY)
        if not salt_hex or not expected:
            return False
        try:
            other = DigestEngine.from_salt_hex(salt_hex, iterations=self._iterations)
        except ValueError:
            logger.debug("Malformed salt in digest set: %r", salt_hex)
            return False
        return other.derive_key(text) == expected
