"""Cart API Routes

FastAPI routes for reading and mutating a session's cart.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import client_error
from src.api.schemas.cart_request import (
    AddLineItemRequestSchema,
    CartCountResponseSchema,
    SetQuantityRequestSchema,
)
from src.adapter.repositories.line_item_store import SqlAlchemyLineItemStore
from src.adapter.services.notification_service import CartItemCounter
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.cart.add_line_item import AddLineItem
from src.app.use_cases.cart.consolidate_cart import ConsolidateCart
from src.app.use_cases.cart.dtos import (
    AddLineItemCommandDTO,
    CartViewDTO,
    RemoveLineItemCommandDTO,
    SetQuantityCommandDTO,
)
from src.app.use_cases.cart.remove_line_item import RemoveLineItem
from src.app.use_cases.cart.set_quantity import SetQuantity
from src.depends import (
    get_cart_item_counter,
    get_change_notifier,
    get_checkout_registry,
    get_inventory_gateway,
    get_pricing,
    get_session,
)

router = APIRouter(prefix="/carts", tags=["Cart"])


@router.get(
    "/{session_id}",
    response_model=CartViewDTO,
    status_code=status.HTTP_200_OK,
)
async def get_cart(
    session_id: str,
    session: AsyncSession = Depends(get_session),
    inventory_gateway=Depends(get_inventory_gateway),
    notifier=Depends(get_change_notifier),
    pricing=Depends(get_pricing),
    checkout_registry=Depends(get_checkout_registry),
):
    """
    Load the cart in consolidated form.

    Entries for the same product and employee are merged, quantities are
    clamped to live stock and the merged shape is written back when it
    changed. Stock lookups that failed are listed in
    `stock_fetch_failures`; those lines keep their last known stock.

    **Returns:**
    - 200: Consolidated cart with pricing and any quantity adjustments
    - 503: Cart storage unavailable
    """
    uow = SqlAlchemyUnitOfWork(session)
    store = SqlAlchemyLineItemStore(session, ApplicationConfig.CART_SLOT_NAME)

    use_case = ConsolidateCart(uow, store, inventory_gateway, notifier, pricing, checkout_registry)
    result = await use_case.execute(session_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.post(
    "/{session_id}/items",
    response_model=CartViewDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Stock or account conflict",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "STOCK_EXCEEDED",
                            "message": "Sorry, only 5 units of \"Nitrile Gloves (M)\" are available in stock. You already have 4 in your cart."
                        }
                    }
                }
            }
        }
    }
)
async def add_line_item(
    session_id: str,
    request: AddLineItemRequestSchema,
    session: AsyncSession = Depends(get_session),
    notifier=Depends(get_change_notifier),
    checkout_registry=Depends(get_checkout_registry),
    pricing=Depends(get_pricing),
):
    """
    Add a catalog product to the cart.

    **Returns:**
    - 201: Cart including the new entry
    - 409: OUT_OF_STOCK, STOCK_EXCEEDED, COMPANY_MISMATCH or CART_LOCKED
    """
    uow = SqlAlchemyUnitOfWork(session)
    store = SqlAlchemyLineItemStore(session, ApplicationConfig.CART_SLOT_NAME)

    command = AddLineItemCommandDTO(session_id=session_id, **request.model_dump())

    use_case = AddLineItem(uow, store, notifier, pricing, checkout_registry)
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.patch(
    "/{session_id}/items/{item_id}",
    response_model=CartViewDTO,
    status_code=status.HTTP_200_OK,
)
async def set_quantity(
    session_id: str,
    item_id: str,
    request: SetQuantityRequestSchema,
    session: AsyncSession = Depends(get_session),
    inventory_gateway=Depends(get_inventory_gateway),
    notifier=Depends(get_change_notifier),
    checkout_registry=Depends(get_checkout_registry),
    pricing=Depends(get_pricing),
):
    """
    Change a line item's quantity (below 1 removes it).

    **Returns:**
    - 200: Updated cart
    - 404: Line item not in cart
    - 409: Quantity above available stock, or cart locked by a submission
    - 502: Stock could not be verified
    """
    uow = SqlAlchemyUnitOfWork(session)
    store = SqlAlchemyLineItemStore(session, ApplicationConfig.CART_SLOT_NAME)

    command = SetQuantityCommandDTO(
        session_id=session_id,
        line_item_id=item_id,
        quantity=request.quantity,
    )

    use_case = SetQuantity(uow, store, inventory_gateway, notifier, pricing, checkout_registry)
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.delete(
    "/{session_id}/items/{item_id}",
    response_model=CartViewDTO,
    status_code=status.HTTP_200_OK,
)
async def remove_line_item(
    session_id: str,
    item_id: str,
    session: AsyncSession = Depends(get_session),
    notifier=Depends(get_change_notifier),
    checkout_registry=Depends(get_checkout_registry),
    pricing=Depends(get_pricing),
):
    """Remove a line item and every entry merged into it."""
    uow = SqlAlchemyUnitOfWork(session)
    store = SqlAlchemyLineItemStore(session, ApplicationConfig.CART_SLOT_NAME)

    command = RemoveLineItemCommandDTO(session_id=session_id, line_item_id=item_id)

    use_case = RemoveLineItem(uow, store, notifier, pricing, checkout_registry)
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.get(
    "/{session_id}/count",
    response_model=CartCountResponseSchema,
    status_code=status.HTTP_200_OK,
)
async def get_cart_count(
    session_id: str,
    session: AsyncSession = Depends(get_session),
    counter: CartItemCounter = Depends(get_cart_item_counter),
):
    """
    Number of entries in the cart, as tracked from change notifications.

    Reads the store once for a session the counter has not seen yet.
    """
    count = counter.get(session_id)
    if count is None:
        store = SqlAlchemyLineItemStore(session, ApplicationConfig.CART_SLOT_NAME)
        count = len(await store.load(session_id))
        counter.prime(session_id, count)

    return CartCountResponseSchema(session_id=session_id, count=count)
