"""Account API Routes"""

from fastapi import APIRouter, Depends, status

from src.api.error import client_error
from src.app.use_cases.cart.dtos import AccountStatusDTO
from src.app.use_cases.cart.get_account_status import GetAccountStatus
from src.depends import get_account_gateway

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get(
    "/{name}/status",
    response_model=AccountStatusDTO,
    status_code=status.HTTP_200_OK,
)
async def get_account_status(
    name: str,
    account_gateway=Depends(get_account_gateway),
):
    """
    Credit standing of an account.

    **Returns:**
    - 200: Limit, balance, available balance and status (active, warning, over_limit)
    - 404: No account with that name
    - 502: Accounts could not be loaded
    """
    result = await GetAccountStatus(account_gateway).execute(name)

    if result.is_err():
        raise client_error(result.error)

    return result.value
