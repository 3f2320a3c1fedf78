from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.security import (
    security, verify_token, AuthenticationError,
    AuthorizationError, UserRole, TokenPayload, AuthenticatedUser
)
from ..models.patient import PatientProfile
from ..services.profile_service import ProfileService
from ..services.notification_service import EmailTransport, get_email_transport
from ..services.realtime import ChangeBroadcaster, get_inventory_broadcaster

async def get_current_user_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    token = credentials.credentials

    # Verify token
    token_payload = verify_token(token)
    if not token_payload:
        raise AuthenticationError("Invalid or expired token")

    # Platform access tokens may omit token_type; refresh tokens never reach the API
    if token_payload.token_type not in (None, "access"):
        raise AuthenticationError("Invalid token type")

    return token_payload

async def get_current_user(
    token_payload: TokenPayload = Depends(get_current_user_token)
) -> AuthenticatedUser:
    """Identity of the caller as asserted by the auth platform."""
    if not token_payload.sub:
        raise AuthenticationError("Invalid token payload")

    return AuthenticatedUser(
        id=token_payload.sub,
        email=token_payload.email,
        role=token_payload.role
    )

async def get_current_patient(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> PatientProfile:
    """Patient profile of the caller; 404 sends the client to onboarding."""
    return ProfileService(db).get_patient_profile(current_user.id)

# Role-based access control dependencies
def require_role(allowed_roles: List[UserRole]):
    """Create a dependency that requires one of the given application roles."""
    async def role_checker(
        current_user: AuthenticatedUser = Depends(get_current_user),
        db: Session = Depends(get_db)
    ) -> AuthenticatedUser:
        roles = set(ProfileService(db).get_roles(current_user.id))
        if current_user.role:
            roles.add(current_user.role)

        if not roles.intersection(role.value for role in allowed_roles):
            raise AuthorizationError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return current_user

    return role_checker

async def get_admin_user(
    current_user: AuthenticatedUser = Depends(require_role([UserRole.ADMIN]))
) -> AuthenticatedUser:
    """Require admin role."""
    return current_user

def get_notification_transport() -> EmailTransport:
    return get_email_transport()

def get_broadcaster() -> ChangeBroadcaster:
    return get_inventory_broadcaster()

# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Fixed-window rate limit per client address for the public functions."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{request.url.path}:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.RATE_LIMIT_REQUESTS:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
