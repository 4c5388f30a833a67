"""ID and timestamp utilities."""

import secrets
import time


def gen_id(prefix: str = "") -> str:
    """Generate prefixed IDs: inv_xxx, evt_xxx, conv_xxx"""
    return f"{prefix}{secrets.token_urlsafe(12)}"


def short_id() -> str:
    """Short random suffix for export set and case identifiers."""
    return secrets.token_hex(4)


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)
