"""
Credential store and token service.

Passwords are hashed with bcrypt (work factor 12). Tokens are HS256 JWTs (Authlib JOSE)
carrying the company id and email, valid for JWT_EXPIRES_DAYS.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from authlib.jose import JsonWebToken
from authlib.jose.errors import JoseError, ExpiredTokenError
from flask import current_app

from careers.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
BEARER_PREFIX = 'Bearer '


def hash_password(password: str) -> str:
    """Generate a bcrypt hash for a password."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Verify a password against a bcrypt hash. Malformed hashes never match."""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def _secret() -> str:
    secret = current_app.config.get('JWT_SECRET')
    if not secret:
        raise ConfigurationError("JWT_SECRET is not configured")
    return secret


def _algorithm() -> str:
    return current_app.config.get('JWT_ALGORITHM', 'HS256')


def _jwt() -> JsonWebToken:
    # Accept the configured algorithm only
    return JsonWebToken([_algorithm()])


def issue_token(identity: dict) -> str:
    """
    Sign a token for an authenticated company.

    Args:
        identity: dict with at least ``id`` and ``email``

    Returns:
        Encoded JWT string
    """
    secret = _secret()
    now = datetime.now(timezone.utc)
    days = current_app.config.get('JWT_EXPIRES_DAYS', 7)
    payload = {
        'id': identity['id'],
        'email': identity['email'],
        'iat': int(now.timestamp()),
        'exp': int((now + timedelta(days=days)).timestamp()),
    }
    token = _jwt().encode({'alg': _algorithm()}, payload, secret)
    return token.decode('utf-8')


def verify_token(token: Optional[str]) -> Optional[dict]:
    """Decode a token; None when it is missing, expired, forged or malformed."""
    if not token:
        return None
    try:
        secret = _secret()
    except ConfigurationError as e:
        logger.error(f"Token verification impossible: {e.message}")
        return None

    try:
        claims = _jwt().decode(token, secret, claims_options={'exp': {'essential': True}})
        claims.validate()
    except ExpiredTokenError:
        logger.info("Token rejected: expired")
        return None
    except (JoseError, ValueError) as e:
        logger.info(f"Token rejected: {e}")
        return None

    payload = dict(claims)
    if not payload.get('id') or not payload.get('email'):
        logger.info("Token rejected: missing identity claims")
        return None
    return payload


def extract_bearer(header: Optional[str]) -> Optional[str]:
    """Strip the 'Bearer ' prefix; the raw value is returned when absent."""
    if not header:
        return None
    if header.startswith(BEARER_PREFIX):
        return header[len(BEARER_PREFIX):].strip() or None
    return header.strip() or None
