"""Content fingerprint used as a deduplication and audit key. Not for security."""

from typing import Union

import xxhash


FINGERPRINT_SEED = 0


def fingerprint(raw_text: Union[str, bytes]) -> int:
    """Return the unsigned 64-bit XXH64 of the text's UTF-8 bytes."""
    data = raw_text if isinstance(raw_text, bytes) else raw_text.encode('utf-8')
    return xxhash.xxh64_intdigest(data, seed=FINGERPRINT_SEED)
