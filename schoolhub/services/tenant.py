from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from schoolhub.crud import tenant as tenant_crud
from schoolhub.models.tenant import Tenant, TenantStatus
from schoolhub.schemas.tenant import TenantCreate, TenantUpdate
from schoolhub.core.exceptions import ConflictError, NotFoundError
from schoolhub.core.logging_config import logger


class TenantService:
    """
    Service layer for school (tenant) onboarding and administration.
    """

    def __init__(self):
        self.crud = tenant_crud

    def get_tenant(self, db: Session, tenant_id: int) -> Tenant:
        tenant = self.crud.get(db, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant")
        return tenant

    def get_tenants(
        self,
        db: Session,
        search: Optional[str] = None,
        status: Optional[TenantStatus] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Tenant], int]:
        return self.crud.get_filtered(db, search=search, status=status, page=page, limit=limit)

    def create_tenant(self, db: Session, tenant_data: TenantCreate) -> dict:
        """
        Bootstrap a school with its default roles and first admin.

        Either every row lands or none does.

        Raises:
            ConflictError: Domain or contact email already taken
        """
        if self.crud.get_by_domain(db, tenant_data.domain):
            raise ConflictError(f"Tenant with domain '{tenant_data.domain}' already exists")
        if self.crud.get_by_email(db, tenant_data.email):
            raise ConflictError(f"Tenant with email '{tenant_data.email}' already exists")

        try:
            tenant, admin, roles = self.crud.create_with_admin(db, obj_in=tenant_data)
        except IntegrityError:
            # A concurrent bootstrap took the domain or email after our check
            raise ConflictError("Tenant domain or email already exists")

        logger.info(f"Tenant bootstrapped: id={tenant.id}, domain={tenant.domain}, admin_user_id={admin.id}")
        return {
            "tenant": tenant,
            "admin_user_id": admin.id,
            "admin_email": admin.email,
            "roles": [r.name for r in roles],
        }

    def update_tenant(self, db: Session, tenant_id: int, tenant_data: TenantUpdate) -> Tenant:
        tenant = self.get_tenant(db, tenant_id)
        if tenant_data.email and tenant_data.email.lower() != tenant.email:
            existing = self.crud.get_by_email(db, tenant_data.email)
            if existing and existing.id != tenant.id:
                raise ConflictError(f"Tenant with email '{tenant_data.email}' already exists")
        return self.crud.update(db, db_obj=tenant, obj_in=tenant_data)


tenant_service = TenantService()
