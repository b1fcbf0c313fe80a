"""
Modulo di sicurezza per autenticazione JWT
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Funzioni per hashing password e gestione token JWT.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings, get_settings
from app.core.exceptions import AuthenticationError
from app.schemas.token import TokenPayload

# Context per hashing password
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hasha una password in chiaro.

    Args:
        password: Password in chiaro

    Returns:
        Password hashata
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica una password in chiaro contro una hashata.

    Args:
        plain_password: Password in chiaro
        hashed_password: Password hashata

    Returns:
        True se la password corrisponde, False altrimenti
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: str,
    role: str,
    session_id: str,
    settings: Optional[Settings] = None,
) -> str:
    """
    Crea un token di accesso JWT legato a una sessione.

    Args:
        user_id: ID dell'utente
        role: Ruolo dell'utente
        session_id: ID del record di sessione

    Returns:
        Token JWT codificato
    """
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.access_token_expire_minutes
    )

    payload = {
        "sub": user_id,
        "sid": session_id,
        "role": role,
        "exp": expire,
        "type": "access",
    }

    return jwt.encode(
        payload,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str, settings: Optional[Settings] = None) -> TokenPayload:
    """
    Decodifica e valida un token JWT.

    Args:
        token: Token JWT da decodificare

    Returns:
        TokenPayload con i dati del token

    Raises:
        AuthenticationError: Se il token è invalido o scaduto
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(f"Invalid or expired token: {e}") from e

    if not payload.get("sub") or not payload.get("sid"):
        raise AuthenticationError("Invalid token: missing subject")

    return TokenPayload(
        sub=payload["sub"],
        sid=payload["sid"],
        role=payload.get("role", ""),
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        type=payload.get("type", ""),
    )


# Export delle funzioni
__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
