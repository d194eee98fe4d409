# File location: src/app/utils/dependencies.py
import logging
from typing import Annotated, Callable, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session, select

from src.app.config.settings import Settings
from src.app.db.session import get_db
from src.app.models.user import AppRole, User, UserRole
from src.app.utils.ai_gateway import AIGatewayClient
from src.app.utils.security import decode_access_token

logger = logging.getLogger(__name__)

# Tokens are issued by the identity service; this API only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ai_gateway(request: Request) -> AIGatewayClient:
    return request.app.state.ai_gateway


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> User:
    """
    Resolve the caller from the bearer token. The identity always comes from
    the verified claims, never from the request body.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = decode_access_token(token, settings)
    raw_user_id = payload.get("user_id") or payload.get("sub")
    if raw_user_id is None:
        raise credentials_exception
    try:
        user_id = UUID(str(raw_user_id))
    except ValueError:
        raise credentials_exception

    user = session.get(User, user_id)
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
    return user


def get_user_role(session: Session, user_id: UUID) -> Optional[AppRole]:
    role_row = session.exec(select(UserRole).where(UserRole.user_id == user_id)).first()
    return role_row.role if role_row else None


def require_roles(*allowed: AppRole) -> Callable:
    """Dependency factory: 403 unless the caller's role is one of ``allowed``."""
    allowed_names = " or ".join(role.value.capitalize() for role in allowed)

    async def _checker(
        current_user: Annotated[User, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_db)],
    ) -> User:
        role = get_user_role(session, current_user.id)
        if role not in allowed:
            logger.warning(f"User {current_user.id} with role {role} denied; requires {allowed_names}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Unauthorized - {allowed_names} role required",
            )
        return current_user

    return _checker


get_current_staff_user = require_roles(AppRole.faculty, AppRole.admin)
