from typing import Iterable, List, Set
from sqlalchemy.orm import Session
from schoolhub.crud import role as role_crud


class AuthorizationService:
    """
    Permission resolution for a user inside one tenant.

    A user's effective permissions are the union over all of their roles in
    that tenant. There is no role-name shortcut: a Super Admin passes checks
    only because its role is granted every permission.
    """

    def __init__(self):
        self.crud = role_crud

    def get_permissions(self, db: Session, user_id: int, tenant_id: int) -> Set[str]:
        return self.crud.get_permission_names(db, user_id=user_id, tenant_id=tenant_id)

    def has_permission(self, db: Session, user_id: int, tenant_id: int, permission: str) -> bool:
        return permission in self.get_permissions(db, user_id, tenant_id)

    @staticmethod
    def missing_permissions(granted: Set[str], required: Iterable[str]) -> List[str]:
        """Required permissions absent from the granted set, in request order."""
        return [name for name in required if name not in granted]


authorization_service = AuthorizationService()
