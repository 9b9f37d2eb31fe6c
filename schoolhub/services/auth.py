from datetime import datetime, timezone
from sqlalchemy.orm import Session
from schoolhub.crud import user as user_crud, tenant as tenant_crud, role as role_crud
from schoolhub.models.tenant import TenantStatus
from schoolhub.models.user import User
from schoolhub.schemas.user import LoginRequest
from schoolhub.core.security import verify_password, create_access_token
from schoolhub.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from schoolhub.services.authorization import authorization_service


class AuthService:
    """Credential checks and token issuance."""

    def login(self, db: Session, credentials: LoginRequest) -> dict:
        """
        Verify credentials and issue a bearer token.

        The same email may exist in several schools. When it does, the
        caller must name the school through ``tenant_domain``.

        Raises:
            AuthenticationError: Unknown email, wrong password or inactive user
            ValidationError: Ambiguous email without tenant_domain
            AuthorizationError: The school is suspended or inactive
        """
        candidates = user_crud.get_all_by_email(db, email=credentials.email)
        if credentials.tenant_domain:
            tenant = tenant_crud.get_by_domain(db, credentials.tenant_domain)
            candidates = [u for u in candidates if tenant and u.tenant_id == tenant.id]

        if len(candidates) > 1:
            raise ValidationError(
                "Email is registered with more than one school",
                errors=[{"field": "tenant_domain", "message": "Field required for this email"}],
            )

        user = candidates[0] if candidates else None
        if not user or not verify_password(credentials.password, user.hashed_password):
            raise AuthenticationError("Incorrect email or password")

        if not user.is_active:
            raise AuthenticationError("User account is not active")

        if user.tenant.status in (TenantStatus.SUSPENDED, TenantStatus.INACTIVE):
            raise AuthorizationError("School account is not active")

        user.last_login = datetime.now(timezone.utc)
        db.commit()
        db.refresh(user)

        # Generate JWT access token with user claims
        access_token = create_access_token(
            data={
                "id": str(user.id),
                "email": user.email,
                "tenant_id": user.tenant_id,
            }
        )
        profile = self.get_profile(db, user)
        return {"access_token": access_token, "token_type": "bearer", **profile}

    def get_profile(self, db: Session, user: User) -> dict:
        return {
            "user": user,
            "roles": role_crud.get_role_names(db, user_id=user.id, tenant_id=user.tenant_id),
            "permissions": sorted(authorization_service.get_permissions(db, user.id, user.tenant_id)),
        }


auth_service = AuthService()
