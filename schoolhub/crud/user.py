from typing import Optional, List, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select, or_
from schoolhub.crud.base import CRUDBase
from schoolhub.models.user import User, UserStatus
from schoolhub.schemas.user import UserCreate, UserUpdate
from schoolhub.core.security import get_password_hash


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    """
    CRUD operations for User model.

    Emails are unique per tenant, not globally: the same address can hold an
    account in two schools. Login is the only place that looks across tenants.
    """

    def get_by_email(self, db: Session, *, email: str, tenant_id: int) -> Optional[User]:
        stmt = select(User).where(
            User.email == email.lower(),
            User.tenant_id == tenant_id
        )
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get_all_by_email(self, db: Session, *, email: str) -> List[User]:
        """All accounts sharing an email, across tenants (login only)."""
        stmt = select(User).where(User.email == email.lower()).order_by(User.id)
        result = db.execute(stmt)
        return list(result.scalars().all())

    def get_filtered(
        self,
        db: Session,
        *,
        tenant_id: int,
        search: Optional[str] = None,
        status: Optional[UserStatus] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[User], int]:
        stmt = select(User).where(User.tenant_id == tenant_id)
        if status:
            stmt = stmt.where(User.status == status)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern),
            ))
        stmt = stmt.order_by(User.last_name, User.first_name, User.id)
        return self.paginate(db, stmt, page=page, limit=limit)

    def create_account(
        self,
        db: Session,
        *,
        tenant_id: int,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        status: UserStatus = UserStatus.ACTIVE,
        commit: bool = True
    ) -> User:
        """
        Create a new user with hashed password.

        Args:
            db: Database session
            tenant_id: Tenant the account belongs to
            email: Login email, stored lower-cased
            password: Plain text password (will be hashed)
            commit: Whether to commit immediately or only flush

        Returns:
            Created User instance
        """
        db_user = User(
            tenant_id=tenant_id,
            email=email.lower(),
            hashed_password=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            status=status,
        )
        db.add(db_user)
        self._save(db, db_user, commit)
        return db_user


# Create singleton instance
user = CRUDUser(User)
