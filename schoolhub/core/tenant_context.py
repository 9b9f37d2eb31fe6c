from fastapi import Depends
from schoolhub.models.tenant import Tenant
from schoolhub.dependencies import get_current_tenant


def get_tenant_id(tenant: Tenant = Depends(get_current_tenant)) -> int:
    """
    FastAPI dependency that extracts tenant_id from the authenticated user.

    This dependency should be added to all routes that need tenant isolation.
    The tenant_id is then passed explicitly through service and CRUD layers.

    Args:
        tenant: Active tenant of the user behind the JWT token

    Returns:
        Tenant ID of the current user
    """
    return tenant.id
