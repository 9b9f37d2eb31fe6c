from typing import Set
from fastapi import Depends, Request
from jose import JWTError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select
from schoolhub.database import get_db
from schoolhub.models.tenant import Tenant, TenantStatus
from schoolhub.models.user import User
from schoolhub.core.security import verify_token
from schoolhub.core.exceptions import AuthenticationError, AuthorizationError
from schoolhub.core.permissions import split_permission
from schoolhub.core.logging_config import logger
from schoolhub.services.authorization import authorization_service

BLOCKED_TENANT_STATUSES = (TenantStatus.SUSPENDED, TenantStatus.INACTIVE)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate JWT token from Authorization Bearer header, return the authenticated User.

    Args:
        request: FastAPI Request to extract Authorization header
        db: Database session

    Returns:
        User object with tenant relationship loaded

    Raises:
        AuthenticationError: Missing, malformed or expired token, unknown
            user, or a user whose status is not ACTIVE
    """
    try:
        # Extract token from Authorization header
        authorization = request.headers.get("Authorization")
        if not authorization or not authorization.startswith("Bearer "):
            raise AuthenticationError()

        token = authorization.replace("Bearer ", "")

        payload = verify_token(token)
        user_id = payload.get("id")
        if user_id is None:
            raise AuthenticationError()
        user_id = int(user_id)
    except (JWTError, ValueError):
        raise AuthenticationError()

    # Efficient query: get user with tenant in one go
    stmt = select(User).where(User.id == user_id).options(selectinload(User.tenant))
    user = db.execute(stmt).scalar_one_or_none()

    if user is None:
        raise AuthenticationError()

    if not user.is_active:
        raise AuthenticationError("User account is not active")

    return user


def get_current_tenant(current_user: User = Depends(get_current_user)) -> Tenant:
    """
    Resolve the caller's tenant.

    A missing tenant means the token's user is orphaned (401). A suspended
    or inactive school is locked out entirely (403).
    """
    tenant = current_user.tenant
    if tenant is None:
        raise AuthenticationError()
    if tenant.status in BLOCKED_TENANT_STATUSES:
        logger.warning(f"Blocked request for tenant {tenant.id} with status {tenant.status.value}")
        raise AuthorizationError("School account is not active")
    return tenant


def get_user_permissions(
    current_user: User = Depends(get_current_user),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
) -> Set[str]:
    """
    The caller's granted permission names.

    FastAPI caches dependency results per request, so routes declaring
    several permission checks resolve the set once.
    """
    return authorization_service.get_permissions(db, current_user.id, tenant.id)


def require_permissions(*permissions: str):
    """
    Build a dependency that demands every listed permission (AND).

    Usage:
        current_user: User = Depends(require_permissions("schedules:create"))

    Returns the authenticated user when all permissions are held; raises
    AuthorizationError (403) otherwise. Unauthenticated callers fail earlier
    in get_current_user with 401.
    """
    for name in permissions:
        split_permission(name)
    required = tuple(permissions)

    def permission_checker(
        current_user: User = Depends(get_current_user),
        granted: Set[str] = Depends(get_user_permissions)
    ) -> User:
        missing = authorization_service.missing_permissions(granted, required)
        if missing:
            logger.warning(
                f"Permission denied: user_id={current_user.id}, tenant_id={current_user.tenant_id}, "
                f"missing={missing}"
            )
            raise AuthorizationError()
        return current_user

    return permission_checker
