from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt


def create_access_token(
    config,
    subject: str,
    email: Optional[str] = None,
    expires_delta: timedelta = timedelta(minutes=15),
) -> str:
    """
    Create a bearer token in the identity provider's format.

    Used by local tooling and tests; production tokens come from the provider.

    Args:
        config: ApplicationConfig
        subject: External subject id (sub claim)
        email: Email claim
        expires_delta: Token expiration duration

    Returns:
        JWT token string
    """
    now = datetime.now(UTC)
    payload = {
        "sub": subject,
        "email": email,
        "exp": now + expires_delta,
        "iat": now,
    }
    if config.JWT_AUDIENCE:
        payload["aud"] = config.JWT_AUDIENCE
    if config.JWT_ISSUER:
        payload["iss"] = config.JWT_ISSUER
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_jwt(token: str, config) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string
        config: ApplicationConfig with secret, algorithm, optional audience/issuer

    Returns:
        Decoded payload dict or None if invalid
    """
    options = {"verify_aud": bool(config.JWT_AUDIENCE)}
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            audience=config.JWT_AUDIENCE,
            issuer=config.JWT_ISSUER,
            options=options,
        )
    except JWTError:
        return None

    if not payload.get("sub"):
        return None
    return payload
