"""
Account Endpoints

User lookup/creation, active subscription, billing history and plans.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Response, status

from syncflo.dependencies import get_account_service
from syncflo.models.accounts import FindOrCreateUserRequest
from syncflo.services.account_service import AccountService
from syncflo.utils.exceptions import NotFoundException

router = APIRouter(prefix="/api", tags=["accounts"])


@router.post("/user/find-or-create")
async def find_or_create_user(
    response: Response,
    body: Optional[FindOrCreateUserRequest] = Body(default=None),
    accounts: AccountService = Depends(get_account_service),
):
    """Return the user for an email, creating it (201) if it does not exist."""
    body = body or FindOrCreateUserRequest()
    user, created = await accounts.find_or_create_user(body.email, body.fullName)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return user


@router.get("/subscription/{user_id}")
async def get_subscription(
    user_id: str,
    accounts: AccountService = Depends(get_account_service),
):
    subscription = await accounts.get_active_subscription(user_id)
    if subscription is None:
        raise NotFoundException(
            "No active subscription found.", details={"user_id": user_id}
        )
    return subscription


@router.get("/billing-history/{user_id}")
async def get_billing_history(
    user_id: str,
    accounts: AccountService = Depends(get_account_service),
):
    return await accounts.get_billing_history(user_id)


@router.get("/plans")
async def list_plans(accounts: AccountService = Depends(get_account_service)):
    return await accounts.list_plans()
