from typing import List
from sqlalchemy.orm import Session
from schoolhub.crud import role as role_crud, permission as permission_crud, user as user_crud
from schoolhub.models.permission import Permission
from schoolhub.models.role import Role, UserRole
from schoolhub.schemas.role import RoleCreate, RoleUpdate
from schoolhub.core.exceptions import ConflictError, NotFoundError, ValidationError
from schoolhub.core.permissions import TENANT_ADMIN_PERMISSIONS

GRANTABLE_PERMISSIONS = frozenset(TENANT_ADMIN_PERMISSIONS)


class RoleService:
    """
    Tenant-owned roles and their permission grants.

    System roles (the defaults created at bootstrap) are read-only here so a
    school cannot lock itself out by editing its own admin role.
    """

    def __init__(self):
        self.crud = role_crud

    def get_role(self, db: Session, role_id: int, tenant_id: int) -> Role:
        role = self.crud.get(db=db, id=role_id, tenant_id=tenant_id)
        if not role:
            raise NotFoundError("Role")
        return role

    def get_roles(self, db: Session, tenant_id: int) -> List[Role]:
        return self.crud.get_for_tenant(db, tenant_id=tenant_id)

    def get_permissions(self, db: Session) -> List[Permission]:
        return permission_crud.get_all(db)

    def _resolve_permissions(self, db: Session, names: List[str]) -> List[Permission]:
        """
        Look up permission rows for a school-owned role.

        Platform permissions (``tenants:*``) are never grantable here; only
        what a Tenant Admin holds can be handed out.
        """
        found = permission_crud.get_by_names(db, names)
        unknown = sorted(set(names) - {p.name for p in found})
        if unknown:
            raise ValidationError(
                "Unknown permissions",
                errors=[{"field": "permissions", "message": name} for name in unknown],
            )
        platform_only = sorted(p.name for p in found if p.name not in GRANTABLE_PERMISSIONS)
        if platform_only:
            raise ValidationError(
                "Permissions not grantable to school roles",
                errors=[{"field": "permissions", "message": name} for name in platform_only],
            )
        return found

    def create_role(self, db: Session, role_data: RoleCreate, tenant_id: int) -> Role:
        if self.crud.get_by_name(db, name=role_data.name, tenant_id=tenant_id):
            raise ConflictError(f"Role '{role_data.name}' already exists")
        permissions = self._resolve_permissions(db, role_data.permissions)
        role = self.crud.create_with_permissions(
            db,
            tenant_id=tenant_id,
            name=role_data.name,
            description=role_data.description,
            permissions=permissions,
        )
        return self.get_role(db, role.id, tenant_id)

    def update_role(self, db: Session, role_id: int, role_data: RoleUpdate, tenant_id: int) -> Role:
        role = self.get_role(db, role_id, tenant_id)
        if role.is_system:
            raise ValidationError("System roles cannot be modified")

        if role_data.name and role_data.name != role.name:
            if self.crud.get_by_name(db, name=role_data.name, tenant_id=tenant_id):
                raise ConflictError(f"Role '{role_data.name}' already exists")
            role.name = role_data.name
        if role_data.description is not None:
            role.description = role_data.description

        try:
            if role_data.permissions is not None:
                permissions = self._resolve_permissions(db, role_data.permissions)
                self.crud.set_permissions(db, role=role, permissions=permissions)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(role)
        return role

    def delete_role(self, db: Session, role_id: int, tenant_id: int) -> None:
        role = self.get_role(db, role_id, tenant_id)
        if role.is_system:
            raise ValidationError("System roles cannot be deleted")
        self.crud.delete(db=db, id=role.id, tenant_id=tenant_id)

    def assign_user(self, db: Session, role_id: int, user_id: int, tenant_id: int) -> UserRole:
        role = self.get_role(db, role_id, tenant_id)
        user = user_crud.get(db=db, id=user_id, tenant_id=tenant_id)
        if not user:
            raise NotFoundError("User")
        if self.crud.get_assignment(db, user_id=user.id, role_id=role.id):
            raise ConflictError(f"User already has role '{role.name}'")
        return self.crud.assign_user(db, user_id=user.id, role_id=role.id, tenant_id=tenant_id)

    def unassign_user(self, db: Session, role_id: int, user_id: int, tenant_id: int) -> None:
        role = self.get_role(db, role_id, tenant_id)
        removed = self.crud.unassign_user(db, user_id=user_id, role_id=role.id, tenant_id=tenant_id)
        if not removed:
            raise NotFoundError("Role assignment")


role_service = RoleService()
