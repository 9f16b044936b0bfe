"""
Service key diagnostics.

Supabase service keys are JWTs whose payload names the project (`ref`) and
the role. Printing both before a copy makes it obvious when the prod and
dev keys were swapped or a non-service key was pasted.
"""

from typing import Any

from jose import JWTError, jwt


def decode_jwt_payload(token: str) -> dict[str, Any] | None:
    """
    Return the claims of a JWT without verifying its signature.

    Args:
        token: Encoded JWT

    Returns:
        Claims dict, or None if the token is not a decodable JWT
    """
    if not token or token.count(".") < 2:
        return None
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    return claims if isinstance(claims, dict) else None


def describe_service_key(label: str, token: str) -> str:
    """
    Summarize the project and role a service key belongs to.

    Example:
        >>> describe_service_key("Prod", "not-a-jwt")
        'Prod key ref=?, role=?'
    """
    payload = decode_jwt_payload(token) or {}
    ref = payload.get("ref") or "?"
    role = payload.get("role") or "?"
    return f"{label} key ref={ref}, role={role}"
