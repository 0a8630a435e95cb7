"""
Benchmark records.

Each record is an ID, an 8 byte random value and the SHA256 hash of that
value. Both value and hash are persisted as lowercase hex strings.
"""

import binascii
import hashlib
import os
from dataclasses import dataclass
from typing import Callable, Tuple

from .errors import HashMismatchError, RandomnessError

# 8 bytes is a single 64 bit word, the smallest input SHA256 pads into one block
VALUE_SIZE = 8
DIGEST_SIZE = hashlib.sha256().digest_size


@dataclass(frozen=True)
class Record:
    """A generated row of the 'bench' table."""
    id: int
    value: bytes
    digest: bytes

    def to_row(self) -> Tuple[int, str, str]:
        return self.id, self.value.hex(), self.digest.hex()


def new_record(record_id: int, random_bytes: Callable[[int], bytes] = os.urandom) -> Record:
    """Draw a random value and hash it."""
    try:
        value = random_bytes(VALUE_SIZE)
    except (OSError, NotImplementedError) as e:
        raise RandomnessError(f"Can not read random values: {e}") from e
    return Record(record_id, value, hashlib.sha256(value).digest())


def decode_value(rand) -> bytes:
    """Decode a persisted hex value.

    Raises ValueError or TypeError for anything that is not a hex string,
    including NULL.
    """
    return binascii.unhexlify(rand)


def verify_row(row_id: int, rand, stored_hash: str) -> None:
    """Check a persisted row.

    Decode errors are left to the caller; a hash mismatch is always fatal.
    """
    computed = hashlib.sha256(decode_value(rand)).hexdigest()
    if computed != stored_hash:
        raise HashMismatchError(row_id, stored_hash, computed)
