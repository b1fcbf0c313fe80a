"""
Servizio per l'autenticazione
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Business logic per login, sessioni e gestione utenti.
Utenti e sessioni vivono nelle collezioni `users` e `sessions`
dell'archivio record.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from app.core.config import Settings
from app.core.exceptions import AuthenticationError, DuplicateError
from app.core.record_store import SESSIONS, USERS, RecordStore
from app.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.schemas.token import TokenResponse
from app.schemas.user import SessionInfo, User, UserCreate, UserLogin, UserRole

logger = logging.getLogger(__name__)


class AuthService:
    """Servizio per la gestione dell'autenticazione."""

    def __init__(self, store: RecordStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    async def _users(self) -> List[User]:
        return [User.model_validate(r) for r in await self.store.load_all(USERS)]

    async def ensure_default_admin(self) -> bool:
        """
        Crea l'account amministratore di default se non esiste alcun utente.

        Returns:
            True se l'account è stato creato
        """
        if await self.store.load_all(USERS):
            return False

        admin = User(
            id="1",
            username=self.settings.default_admin_username,
            hashed_password=hash_password(self.settings.default_admin_password),
            role=UserRole.ADMIN,
            created_at=datetime.now(timezone.utc),
        )
        await self.store.save_all(USERS, [admin.to_record()])
        logger.info("Creato account amministratore di default '%s'", admin.username)
        return True

    async def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Verifica le credenziali.

        Returns:
            L'utente se username e password corrispondono, altrimenti None
        """
        for user in await self._users():
            if user.username == username:
                if verify_password(password, user.hashed_password):
                    return user
                break
        return None

    async def login(self, data: UserLogin) -> TokenResponse:
        """
        Autentica un utente, apre una sessione e restituisce il token.

        Raises:
            AuthenticationError: Se le credenziali sono invalide
        """
        user = await self.authenticate(data.username, data.password)
        if user is None:
            logger.info("Login fallito per '%s'", data.username)
            raise AuthenticationError("Invalid username or password")

        session = SessionInfo(
            session_id=uuid.uuid4().hex,
            user_id=user.id,
            username=user.username,
            role=user.role,
            created_at=datetime.now(timezone.utc),
        )
        sessions = self._live_sessions(await self.store.load_all(SESSIONS), session.created_at)
        await self.store.save_all(SESSIONS, [*sessions, session.to_record()])

        logger.info("Login di '%s'", user.username)
        return TokenResponse(
            access_token=create_access_token(
                user.id, user.role.value, session.session_id, self.settings
            ),
            token_type="bearer",
        )

    def _live_sessions(self, records: List[dict], now: datetime) -> List[dict]:
        """Scarta le sessioni il cui token è ormai scaduto."""
        cutoff = now - timedelta(minutes=self.settings.access_token_expire_minutes)
        live = [r for r in records if SessionInfo.model_validate(r).created_at > cutoff]
        if len(live) < len(records):
            logger.debug("Rimosse %d sessioni scadute", len(records) - len(live))
        return live

    async def current_session(self, token: Optional[str]) -> Optional[SessionInfo]:
        """
        Sessione associata al token, se ancora aperta.

        Token assente, invalido, scaduto o sessione chiusa → None.
        """
        if not token:
            return None
        try:
            payload = decode_token(token, self.settings)
        except AuthenticationError as e:
            logger.debug("Token rifiutato: %s", e.detail)
            return None

        for record in await self.store.load_all(SESSIONS):
            if record.get("session_id") == payload.sid:
                return SessionInfo.model_validate(record)
        return None

    async def logout(self, session_id: str) -> bool:
        """Chiude la sessione. True se esisteva."""
        sessions = await self.store.load_all(SESSIONS)
        remaining = [s for s in sessions if s.get("session_id") != session_id]
        if len(remaining) == len(sessions):
            return False
        await self.store.save_all(SESSIONS, remaining)
        return True

    # ------------------------------------------------------------
    # Gestione utenti
    # ------------------------------------------------------------

    async def list_users(self) -> List[User]:
        return await self._users()

    async def add_user(self, data: UserCreate) -> User:
        """
        Aggiunge un utente con ruolo `user`.

        Raises:
            DuplicateError: Se lo username è già registrato
        """
        records = await self.store.load_all(USERS)
        if any(r.get("username") == data.username for r in records):
            raise DuplicateError(f"Username {data.username} is already taken")

        user = User(
            id=uuid.uuid1().hex,
            username=data.username,
            hashed_password=hash_password(data.password),
            role=UserRole.USER,
            created_at=datetime.now(timezone.utc),
        )
        await self.store.save_all(USERS, [*records, user.to_record()])
        logger.info("Utente '%s' creato", user.username)
        return user

    async def delete_user(self, user_id: str) -> bool:
        """Elimina un utente e chiude le sue sessioni. True se esisteva."""
        records = await self.store.load_all(USERS)
        remaining = [r for r in records if r.get("id") != user_id]
        if len(remaining) == len(records):
            return False
        await self.store.save_all(USERS, remaining)

        sessions = await self.store.load_all(SESSIONS)
        await self.store.save_all(
            SESSIONS, [s for s in sessions if s.get("user_id") != user_id]
        )
        logger.info("Utente %s eliminato", user_id)
        return True


# Export
__all__ = [
    "AuthService",
]
