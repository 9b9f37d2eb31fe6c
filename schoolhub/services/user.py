from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from schoolhub.crud import user as user_crud, role as role_crud
from schoolhub.models.user import User, UserStatus
from schoolhub.schemas.user import UserCreate, UserUpdate
from schoolhub.core.exceptions import ConflictError, NotFoundError


class UserService:
    """
    Service layer for user accounts inside a tenant.
    """

    def __init__(self):
        self.crud = user_crud

    def get_user(self, db: Session, user_id: int, tenant_id: int) -> User:
        user = self.crud.get(db=db, id=user_id, tenant_id=tenant_id)
        if not user:
            raise NotFoundError("User")
        return user

    def get_users(
        self,
        db: Session,
        tenant_id: int,
        search: Optional[str] = None,
        status: Optional[UserStatus] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[User], int]:
        return self.crud.get_filtered(
            db, tenant_id=tenant_id, search=search, status=status, page=page, limit=limit
        )

    def ensure_email_available(self, db: Session, email: str, tenant_id: int) -> None:
        if self.crud.get_by_email(db, email=email, tenant_id=tenant_id):
            raise ConflictError(f"User with email {email} already exists")

    def create_user(self, db: Session, user_data: UserCreate, tenant_id: int) -> User:
        """
        Create an account and attach the requested roles in one transaction.

        Only roles owned by the tenant can be attached; platform roles are
        never reachable from here.
        """
        self.ensure_email_available(db, user_data.email, tenant_id)

        roles = []
        for role_id in user_data.role_ids:
            role = role_crud.get(db=db, id=role_id, tenant_id=tenant_id)
            if not role:
                raise NotFoundError("Role")
            roles.append(role)

        try:
            user = self.crud.create_account(
                db,
                tenant_id=tenant_id,
                email=user_data.email,
                password=user_data.password,
                first_name=user_data.first_name,
                last_name=user_data.last_name,
                phone=user_data.phone,
                commit=False,
            )
            for role in roles:
                role_crud.assign_user(db, user_id=user.id, role_id=role.id, tenant_id=tenant_id, commit=False)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(user)
        return user

    def update_user(self, db: Session, user_id: int, user_data: UserUpdate, tenant_id: int) -> User:
        user = self.get_user(db, user_id, tenant_id)
        update_data = user_data.model_dump(exclude_unset=True)
        if update_data.get("email"):
            update_data["email"] = update_data["email"].lower()
            if update_data["email"] != user.email:
                self.ensure_email_available(db, update_data["email"], tenant_id)
        return self.crud.update(db=db, db_obj=user, obj_in=update_data)

    def deactivate_user(self, db: Session, user_id: int, tenant_id: int) -> User:
        """Users are never hard-deleted; deactivation blocks login and tokens."""
        user = self.get_user(db, user_id, tenant_id)
        return self.crud.update(db=db, db_obj=user, obj_in={"status": UserStatus.INACTIVE})


user_service = UserService()
