"""Text encoding for persisted cache envelopes.

Envelopes are JSON objects serialized with orjson and stored as UTF-8
text in the key/value store.
"""

from __future__ import annotations

from typing import Any

import orjson

from entitykit.shared.constants import CacheFields


def encode_envelope(envelope: dict[str, Any]) -> str:
    """Serialize an envelope to its stored text form.

    Raises:
        orjson.JSONEncodeError: If the envelope holds unserializable values
    """
    return orjson.dumps(envelope).decode("utf-8")


def decode_envelope(raw: str) -> dict[str, Any]:
    """Deserialize stored text back to an envelope.

    Raises:
        orjson.JSONDecodeError: If the text is not valid JSON
        ValueError: If the text does not hold a JSON object
    """
    envelope = orjson.loads(raw)
    if not isinstance(envelope, dict):
        msg = f"Cache envelope must be a JSON object, got {type(envelope).__name__}"
        raise ValueError(msg)
    return envelope


def envelope_expiration(envelope: dict[str, Any]) -> int | None:
    """Return the expiration stored in an envelope.

    Raises:
        TypeError: If the expiration is present but not an integer
    """
    expiration = envelope.get(CacheFields.EXPIRATION)
    if expiration is not None and (
        isinstance(expiration, bool) or not isinstance(expiration, int)
    ):
        msg = f"Cache expiration must be an integer, got {type(expiration).__name__}"
        raise TypeError(msg)
    return expiration
