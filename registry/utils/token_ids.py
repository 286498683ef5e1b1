"""
Token id generation for registry auth tokens.
"""
from __future__ import annotations

import secrets

TOKEN_ID_BYTES = 32


def generate_token_id(nbytes: int = TOKEN_ID_BYTES) -> str:
    """Return a high-entropy url-safe token id.

    token_urlsafe yields ~1.3 chars per byte; 32 bytes gives 43 characters.
    """
    return secrets.token_urlsafe(nbytes)
