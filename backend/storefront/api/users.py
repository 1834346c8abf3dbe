"""
Users API Endpoints
Handles registration and account changes

Author: TM3
Date: 2025-10-24
"""
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from storefront.api.dependencies import get_user_service
from storefront.services import UserService
from storefront.services.schemas import RegisterUserCommand

router = APIRouter()


# Request models
class EmailChange(BaseModel):
    email: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


@router.post("/", status_code=status.HTTP_201_CREATED)
def register_user(
    command: RegisterUserCommand,
    service: UserService = Depends(get_user_service)
):
    return {"status": "success", "data": service.register_user(command)}


@router.get("/{user_id}")
def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return {"status": "success", "data": service.get_user(user_id)}


@router.put("/{user_id}/email")
def change_email(
    user_id: str,
    change: EmailChange,
    service: UserService = Depends(get_user_service)
):
    return {"status": "success", "data": service.change_email(user_id, change.email)}


@router.put("/{user_id}/password")
def change_password(
    user_id: str,
    change: PasswordChange,
    service: UserService = Depends(get_user_service)
):
    user = service.change_password(user_id, change.current_password, change.new_password)
    return {"status": "success", "data": user}


@router.post("/{user_id}/deactivate")
def deactivate_user(user_id: str, service: UserService = Depends(get_user_service)):
    return {"status": "success", "data": service.deactivate_user(user_id)}
