"""
Router per l'autenticazione
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Endpoints per login, logout, profilo della sessione corrente e
gestione utenti (solo amministratori).
"""

from fastapi import APIRouter, Depends, Path, Response, status

from app.core.deps import AdminSession, CurrentSession, get_auth_service
from app.core.exceptions import NotFoundError
from app.schemas.token import TokenResponse
from app.schemas.user import SessionInfo, UserCreate, UserLogin, UserResponse
from app.services.auth_service import AuthService

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Effettua il login",
)
async def login(
    data: UserLogin,
    service: AuthService = Depends(get_auth_service),
):
    """
    Effettua il login e restituisce il token di sessione.

    Credenziali errate → 401 "Invalid username or password".
    """
    return await service.login(data)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Chiude la sessione corrente",
)
async def logout(
    session: CurrentSession,
    service: AuthService = Depends(get_auth_service),
) -> Response:
    await service.logout(session.session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/me",
    response_model=SessionInfo,
    summary="Sessione corrente",
)
async def get_me(session: CurrentSession):
    """Restituisce utente e ruolo della sessione aperta."""
    return session


# -------------------------------------------------------------------
# Gestione utenti (admin)
# -------------------------------------------------------------------

@router.get(
    "/users",
    response_model=list[UserResponse],
    summary="Lista utenti",
)
async def list_users(
    admin: AdminSession,
    service: AuthService = Depends(get_auth_service),
):
    return await service.list_users()


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Aggiunge un utente",
)
async def add_user(
    data: UserCreate,
    admin: AdminSession,
    service: AuthService = Depends(get_auth_service),
):
    """Aggiunge un utente con ruolo `user`. Username già presente → 409."""
    return await service.add_user(data)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Elimina un utente",
)
async def delete_user(
    admin: AdminSession,
    user_id: str = Path(..., description="ID dell'utente"),
    service: AuthService = Depends(get_auth_service),
) -> Response:
    if not await service.delete_user(user_id):
        raise NotFoundError(f"User {user_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Export
__all__ = ["router"]
