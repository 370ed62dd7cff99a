"""Auth API — registration, login, current user.

- POST /auth/register → new organization + its first ADMIN user + token
- POST /auth/login    → email/password → token
- GET  /auth/me       → the caller's own user record

register and login are on the public allow-list; /me is not.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.errors import raise_for_failure
from taskhub.auth.dependencies import get_current_identity
from taskhub.auth.identity import IdentityContext
from taskhub.auth.jwt import TokenCodec, get_token_codec
from taskhub.db.engine import get_db
from taskhub.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserRead
from taskhub.services.auth_service import AuthService, AuthSession
from taskhub.services.user_service import UserService

router = APIRouter(prefix="/auth")


def _auth_svc(
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthService:
    return AuthService(db, codec)


def _response(session: AuthSession) -> AuthResponse:
    user = session.user
    return AuthResponse(
        token=session.token,
        user_id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        tenant_id=user.tenant_id,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_auth_svc)):
    """Create a new organization and its first (ADMIN) user."""
    session = raise_for_failure(
        await svc.register(
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            organization_name=body.organization_name,
        )
    )
    return _response(session)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_auth_svc)):
    """Login with email and password → token."""
    session = raise_for_failure(await svc.login(body.email, body.password))
    return _response(session)


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: IdentityContext = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    return raise_for_failure(await UserService(db).get_me(identity))
