"""Checkout API Routes

FastAPI routes driving a cart through review, payment and order creation.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import client_error
from src.api.schemas.cart_request import SubmitOrderRequestSchema
from src.adapter.repositories.line_item_store import SqlAlchemyLineItemStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.checkout_registry import CheckoutRegistry
from src.app.use_cases.cart.dtos import (
    CheckoutStateDTO,
    OrderSubmissionResponseDTO,
    SubmitOrderCommandDTO,
)
from src.app.use_cases.cart.submission_controller import SubmissionController
from src.depends import (
    get_account_gateway,
    get_change_notifier,
    get_checkout_registry,
    get_inventory_gateway,
    get_order_gateway,
    get_pricing,
    get_session,
)

router = APIRouter(prefix="/carts/{session_id}/checkout", tags=["Checkout"])


def get_submission_controller(
    session: AsyncSession = Depends(get_session),
    checkout_registry: CheckoutRegistry = Depends(get_checkout_registry),
    inventory_gateway=Depends(get_inventory_gateway),
    account_gateway=Depends(get_account_gateway),
    order_gateway=Depends(get_order_gateway),
    notifier=Depends(get_change_notifier),
    pricing=Depends(get_pricing),
) -> SubmissionController:
    return SubmissionController(
        checkout_registry=checkout_registry,
        uow=SqlAlchemyUnitOfWork(session),
        store=SqlAlchemyLineItemStore(session, ApplicationConfig.CART_SLOT_NAME),
        inventory_gateway=inventory_gateway,
        account_gateway=account_gateway,
        order_gateway=order_gateway,
        notifier=notifier,
        pricing=pricing,
        currency=ApplicationConfig.CURRENCY,
        shipping_country=ApplicationConfig.SHIPPING_COUNTRY,
    )


@router.get("", response_model=CheckoutStateDTO, status_code=status.HTTP_200_OK)
async def get_checkout_state(
    session_id: str,
    controller: SubmissionController = Depends(get_submission_controller),
):
    """Current checkout state of the cart."""
    return controller.get_state(session_id)


@router.post(
    "/review",
    response_model=CheckoutStateDTO,
    status_code=status.HTTP_200_OK,
    responses={
        409: {
            "description": "Stock changed since the cart was built",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PRE_SUBMISSION_STOCK_MISMATCH",
                            "message": "Cannot send order. Stock issues detected.",
                            "details": [
                                {"product_name": "Nitrile Gloves (M)", "requested": 6, "available": 4}
                            ]
                        }
                    }
                }
            }
        }
    }
)
async def request_review(
    session_id: str,
    controller: SubmissionController = Depends(get_submission_controller),
):
    """
    Re-validate stock and open payment selection.

    **Returns:**
    - 200: Checkout moved to payment_selection
    - 400: Cart is empty
    - 409: Stock mismatch (every offending line in `details`) or wrong state
    """
    result = await controller.request_review(session_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.post(
    "/submit",
    response_model=OrderSubmissionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Credit limit exceeded",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CREDIT_LIMIT_EXCEEDED",
                            "message": "Order total 120.00 exceeds available credit 80.00 for Seef Dental Clinic"
                        }
                    }
                }
            }
        }
    }
)
async def submit_order(
    session_id: str,
    request: SubmitOrderRequestSchema,
    controller: SubmissionController = Depends(get_submission_controller),
):
    """
    Submit the cart as an order awaiting accountant review.

    **Request body:**
    - `payment_method` (required): cash, visa, benefitpay, flooss or credit

    **Returns:**
    - 201: Order created, cart cleared
    - 402: Credit payment above available balance
    - 404: Cart's account not found
    - 409: Wrong checkout state or submission already in flight
    - 502: Order backend refused the order (cart kept)
    """
    command = SubmitOrderCommandDTO(session_id=session_id, payment_method=request.payment_method)
    result = await controller.submit(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.post("/cancel", response_model=CheckoutStateDTO, status_code=status.HTTP_200_OK)
async def cancel_checkout(
    session_id: str,
    controller: SubmissionController = Depends(get_submission_controller),
):
    """Abandon checkout; the cart is kept."""
    result = await controller.cancel(session_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value
