"""
File names for snapshot rows.

Row identities are percent-encoded into a single, portable path segment.
Letters, digits and a small set of punctuation that is legal on every common
filesystem are kept literally, so simple keys stay readable (`id=1.json`).
Everything else, including path separators, '%', '#', control characters
and non-ASCII text, is escaped, which keeps the encoding injective.

Names longer than the configured limit are truncated and suffixed with
'#' plus a SHA-256 prefix of the identity. A literal '#' never appears in an
encoded stem, so truncated names cannot collide with untruncated ones.
"""

import hashlib
from urllib.parse import quote

SNAPSHOT_EXTENSION = ".json"

# Kept literally in addition to the always-safe ASCII letters, digits and "_.-~"
SAFE_CHARACTERS = "=;,+@!$&'()"

HASH_SEPARATOR = "#"
HASH_LENGTH = 16

DEFAULT_MAX_FILE_NAME_LENGTH = 255
MIN_FILE_NAME_LENGTH = 32


def encode_identity(identity: str) -> str:
    """Percent-encode a row identity without any length limit."""
    return quote(identity, safe=SAFE_CHARACTERS, encoding="utf-8", errors="surrogatepass")


def identity_digest(identity: str) -> str:
    """Return the hash suffix used for truncated names."""
    data = identity.encode("utf-8", errors="surrogatepass")
    return hashlib.sha256(data).hexdigest()[:HASH_LENGTH]


def encode_file_name(identity: str, max_length: int = DEFAULT_MAX_FILE_NAME_LENGTH) -> str:
    """
    Map a row identity to a snapshot file name.

    Args:
        identity: Row identity string (may be empty)
        max_length: Maximum length of the resulting name, extension included

    Returns:
        A file name ending in '.json' with no directory separators

    Raises:
        ValueError: If max_length is below MIN_FILE_NAME_LENGTH
    """
    if max_length < MIN_FILE_NAME_LENGTH:
        raise ValueError(
            f"max_length must be at least {MIN_FILE_NAME_LENGTH}, got {max_length}"
        )

    stem = encode_identity(identity)
    if len(stem) + len(SNAPSHOT_EXTENSION) <= max_length:
        return stem + SNAPSHOT_EXTENSION

    budget = max_length - len(SNAPSHOT_EXTENSION) - len(HASH_SEPARATOR) - HASH_LENGTH
    head = stem[:budget]

    # Don't leave half of a %XX escape at the cut
    partial = head.rfind("%", max(0, len(head) - 2))
    if partial != -1:
        head = head[:partial]

    return f"{head}{HASH_SEPARATOR}{identity_digest(identity)}{SNAPSHOT_EXTENSION}"


def is_snapshot_file_name(name: str) -> bool:
    """Check whether a directory entry name is a snapshot file."""
    return name.endswith(SNAPSHOT_EXTENSION)
