"""Storage key derivation."""

import re

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.-]")


def sanitize_filename(filename: str) -> str:
    """Replace every character outside ``[A-Za-z0-9.-]`` with ``_``."""
    return _UNSAFE_CHARS.sub("_", filename)


def build_storage_key(filename: str, timestamp_ms: int) -> str:
    """Build the object key ``{timestamp_ms}_{sanitized filename}``.

    Two files with the same name in the same millisecond get the same key.
    """
    return f"{timestamp_ms}_{sanitize_filename(filename)}"
