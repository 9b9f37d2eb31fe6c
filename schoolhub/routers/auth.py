from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import get_current_user, get_current_tenant
from schoolhub.models.user import User
from schoolhub.models.tenant import Tenant
from schoolhub.schemas.common import ApiResponse
from schoolhub.schemas.user import LoginRequest, LoginResponse, ProfileResponse
from schoolhub.services import auth_service
from schoolhub.core.logging_config import logger

router = APIRouter()


@router.post("/login", response_model=ApiResponse[LoginResponse])
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange email and password for a bearer token.

    The token carries the user id, tenant id and email. The response also
    lists the caller's roles and effective permissions so the dashboard can
    shape its navigation.
    """
    result = auth_service.login(db, credentials)
    logger.info(f"User logged in: id={result['user'].id}, tenant_id={result['user'].tenant_id}")
    return {"success": True, "message": "Login successful", "data": result}


@router.get("/me", response_model=ApiResponse[ProfileResponse])
def read_profile(
    current_user: User = Depends(get_current_user),
    _tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": auth_service.get_profile(db, current_user)}
