from typing import Tuple, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, or_
from schoolhub.models.tenant import Tenant, TenantStatus
from schoolhub.models.user import User
from schoolhub.models.role import Role
from schoolhub.schemas.tenant import TenantCreate, TenantUpdate
from schoolhub.crud.base import paginate
from schoolhub.crud.user import user as user_crud
from schoolhub.crud.role import role as role_crud, permission as permission_crud
from schoolhub.core.permissions import DEFAULT_TENANT_ROLES, TENANT_ADMIN_ROLE


class CRUDTenant:
    """
    CRUD operations for Tenant model.

    Note: Tenant model doesn't have tenant_id (it IS the tenant),
    so we don't inherit from CRUDBase.
    """

    def __init__(self):
        self.model = Tenant

    def get(self, db: Session, tenant_id: int) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        return db.execute(stmt).scalar_one_or_none()

    def get_by_domain(self, db: Session, domain: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.domain == domain.lower())
        return db.execute(stmt).scalar_one_or_none()

    def get_by_email(self, db: Session, email: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.email == email.lower())
        return db.execute(stmt).scalar_one_or_none()

    def get_filtered(
        self,
        db: Session,
        *,
        search: Optional[str] = None,
        status: Optional[TenantStatus] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Tenant], int]:
        stmt = select(Tenant)
        if status:
            stmt = stmt.where(Tenant.status == status)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Tenant.name.ilike(pattern), Tenant.domain.ilike(pattern)))
        stmt = stmt.order_by(Tenant.name, Tenant.id)
        return paginate(db, stmt, page=page, limit=limit)

    def create_with_admin(
        self,
        db: Session,
        *,
        obj_in: TenantCreate
    ) -> Tuple[Tenant, User, List[Role]]:
        """
        Bootstrap a tenant: the tenant row, its default roles with their
        permission grants, and the first admin user holding Tenant Admin.

        Every step only flushes; one commit at the end makes the whole
        bootstrap visible at once. Any exception rolls everything back and
        is re-raised for the service to translate.

        Returns:
            Tuple of (tenant, admin user, created roles)
        """
        try:
            tenant = Tenant(
                name=obj_in.name,
                email=obj_in.email.lower(),
                domain=obj_in.domain.lower(),
                address=obj_in.address,
                phone=obj_in.phone,
                subscription_plan=obj_in.subscription_plan,
                max_users=obj_in.max_users,
                currency=obj_in.currency,
                timezone=obj_in.timezone,
            )
            db.add(tenant)
            db.flush()  # Get tenant.id without committing

            catalogue = {p.name: p for p in permission_crud.ensure_catalogue(db)}

            roles = []
            for name, (description, permission_names) in DEFAULT_TENANT_ROLES.items():
                roles.append(role_crud.create_with_permissions(
                    db,
                    tenant_id=tenant.id,
                    name=name,
                    description=description,
                    permissions=[catalogue[p] for p in permission_names],
                    is_system=True,
                    commit=False,
                ))

            admin = user_crud.create_account(
                db,
                tenant_id=tenant.id,
                email=obj_in.admin_email,
                password=obj_in.admin_password,
                first_name=obj_in.admin_first_name,
                last_name=obj_in.admin_last_name,
                commit=False,
            )

            admin_role = next(r for r in roles if r.name == TENANT_ADMIN_ROLE)
            role_crud.assign_user(
                db,
                user_id=admin.id,
                role_id=admin_role.id,
                tenant_id=tenant.id,
                commit=False,
            )

            # Commit everything atomically
            db.commit()
            db.refresh(tenant)
            db.refresh(admin)
            return tenant, admin, roles
        except Exception:
            db.rollback()
            raise

    def update(self, db: Session, *, db_obj: Tenant, obj_in: TenantUpdate) -> Tenant:
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("email"):
            update_data["email"] = update_data["email"].lower()
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


# Create singleton instance
tenant = CRUDTenant()
