from typing import Optional, List, Set, Iterable
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, delete
from schoolhub.crud.base import CRUDBase
from schoolhub.models.permission import Permission
from schoolhub.models.role import Role, RolePermission, UserRole
from schoolhub.schemas.role import RoleCreate, RoleUpdate
from schoolhub.core.permissions import ALL_PERMISSIONS, split_permission


class CRUDPermission:
    """
    Permissions are global rows, not tenant-scoped, so this does not
    inherit from CRUDBase.
    """

    def __init__(self):
        self.model = Permission

    def get_all(self, db: Session) -> List[Permission]:
        stmt = select(Permission).order_by(Permission.resource, Permission.action)
        return list(db.execute(stmt).scalars().all())

    def get_by_names(self, db: Session, names: Iterable[str]) -> List[Permission]:
        names = list(names)
        if not names:
            return []
        stmt = select(Permission).where(Permission.name.in_(names))
        return list(db.execute(stmt).scalars().all())

    def ensure_catalogue(self, db: Session, names: Iterable[str] = ALL_PERMISSIONS) -> List[Permission]:
        """
        Insert any missing permission rows and return them all.

        Only flushes; the caller owns the transaction.
        """
        names = list(names)
        existing = {p.name: p for p in self.get_by_names(db, names)}
        for name in names:
            if name in existing:
                continue
            resource, action = split_permission(name)
            perm = Permission(
                name=name,
                resource=resource,
                action=action,
                description=f"{action.capitalize()} {resource}",
            )
            db.add(perm)
            existing[name] = perm
        db.flush()
        return [existing[name] for name in names]


class CRUDRole(CRUDBase[Role, RoleCreate, RoleUpdate]):

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[Role]:
        stmt = select(Role).where(
            Role.id == id,
            Role.tenant_id == tenant_id
        ).options(selectinload(Role.role_permissions).selectinload(RolePermission.permission))
        return db.execute(stmt).scalar_one_or_none()

    def get_by_name(self, db: Session, *, name: str, tenant_id: Optional[int]) -> Optional[Role]:
        if tenant_id is None:
            condition = Role.tenant_id.is_(None)
        else:
            condition = Role.tenant_id == tenant_id
        stmt = select(Role).where(Role.name == name, condition)
        return db.execute(stmt).scalar_one_or_none()

    def get_for_tenant(self, db: Session, *, tenant_id: int) -> List[Role]:
        stmt = select(Role).where(
            Role.tenant_id == tenant_id
        ).options(
            selectinload(Role.role_permissions).selectinload(RolePermission.permission)
        ).order_by(Role.name)
        return list(db.execute(stmt).scalars().all())

    def create_with_permissions(
        self,
        db: Session,
        *,
        tenant_id: Optional[int],
        name: str,
        description: Optional[str],
        permissions: List[Permission],
        is_system: bool = False,
        commit: bool = True
    ) -> Role:
        role = Role(
            tenant_id=tenant_id,
            name=name,
            description=description,
            is_system=is_system,
        )
        role.role_permissions = [RolePermission(permission=p) for p in permissions]
        db.add(role)
        self._save(db, role, commit)
        return role

    def set_permissions(self, db: Session, *, role: Role, permissions: List[Permission]) -> Role:
        """Replace the role's grants; flushes only."""
        wanted = {p.id for p in permissions}
        role.role_permissions = [rp for rp in role.role_permissions if rp.permission_id in wanted]
        held = {rp.permission_id for rp in role.role_permissions}
        for perm in permissions:
            if perm.id not in held:
                role.role_permissions.append(RolePermission(permission=perm))
        db.flush()
        return role

    def get_assignment(self, db: Session, *, user_id: int, role_id: int) -> Optional[UserRole]:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        return db.execute(stmt).scalar_one_or_none()

    def assign_user(
        self,
        db: Session,
        *,
        user_id: int,
        role_id: int,
        tenant_id: int,
        commit: bool = True
    ) -> UserRole:
        user_role = UserRole(user_id=user_id, role_id=role_id, tenant_id=tenant_id)
        db.add(user_role)
        self._save(db, user_role, commit)
        return user_role

    def unassign_user(self, db: Session, *, user_id: int, role_id: int, tenant_id: int) -> int:
        stmt = delete(UserRole).where(
            UserRole.user_id == user_id,
            UserRole.role_id == role_id,
            UserRole.tenant_id == tenant_id
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount

    def get_role_names(self, db: Session, *, user_id: int, tenant_id: int) -> List[str]:
        stmt = select(Role.name).join(UserRole, UserRole.role_id == Role.id).where(
            UserRole.user_id == user_id,
            UserRole.tenant_id == tenant_id
        ).order_by(Role.name)
        return list(db.execute(stmt).scalars().all())

    def get_permission_names(self, db: Session, *, user_id: int, tenant_id: int) -> Set[str]:
        """
        Union of the permission names over the user's roles in a tenant.

        Walks UserRole -> RolePermission -> Permission. A user with no role
        rows gets an empty set.
        """
        stmt = (
            select(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .where(
                UserRole.user_id == user_id,
                UserRole.tenant_id == tenant_id
            )
            .distinct()
        )
        return set(db.execute(stmt).scalars().all())


# Create singleton instances
permission = CRUDPermission()
role = CRUDRole(Role)
