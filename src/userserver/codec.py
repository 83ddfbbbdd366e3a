"""
=============================================================================
USER JSON CODEC
=============================================================================

Converts request bodies into User values and User values into response
bodies.

    DECODE                                   ENCODE
    ──────                                   ──────
    '{"name":"Ann","email":"a@x.com"}'       User(id=1, name="Ann", ...)
              │                                        │
              ▼                                        ▼
    User(id=None, name="Ann", ...)           '{"id":1,"name":"Ann",...}'

Decoding follows strict typing, nothing more:

    body missing / blank          → CodecError
    not JSON / not an object      → CodecError
    "name" or "email" missing     → CodecError
    "name"/"email" not a string   → CodecError
    "id" present, not int/null    → CodecError
    "id" outside the 32-bit range → CodecError
    extra fields                  → ignored

Empty strings for name or email are accepted; checking content is not
the codec's job.

=============================================================================
"""

from typing import Iterable, Optional
import json

from .models import MIN_ID, MAX_ID, User


class CodecError(ValueError):
    """Raised when a request body cannot be turned into a User."""


_SEPARATORS = (",", ":")


def decode_user(body: Optional[str]) -> User:
    """
    Parse a request body into a User.

    Args:
        body: Text following the header terminator, or None when the
              request had no blank line.

    Returns:
        A User; ``id`` is whatever the client sent (usually None).

    Raises:
        CodecError: If the body is absent, empty or does not describe a
                    user.
    """
    if body is None or not body.strip():
        raise CodecError("Request body is empty")

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise CodecError(f"Invalid JSON body: {e}") from e

    if not isinstance(data, dict):
        raise CodecError("Request body must be a JSON object")

    name = _require_string(data, "name")
    email = _require_string(data, "email")

    user_id = data.get("id")
    # bool is a subclass of int, reject it explicitly
    if user_id is not None and (isinstance(user_id, bool) or not isinstance(user_id, int)):
        raise CodecError("Field 'id' must be an integer")
    if user_id is not None and not MIN_ID <= user_id <= MAX_ID:
        raise CodecError(f"Field 'id' out of range: {user_id}")

    return User(id=user_id, name=name, email=email)


def _require_string(data: dict, key: str) -> str:
    if key not in data:
        raise CodecError(f"Missing field '{key}'")
    value = data[key]
    if not isinstance(value, str):
        raise CodecError(f"Field '{key}' must be a string")
    return value


def encode_user(user: User) -> str:
    """Compact JSON object for a single user."""
    return json.dumps(user.to_dict(), separators=_SEPARATORS, ensure_ascii=False)


def encode_users(users: Iterable[User]) -> str:
    """Compact JSON array, in the order given."""
    return json.dumps([user.to_dict() for user in users], separators=_SEPARATORS, ensure_ascii=False)
