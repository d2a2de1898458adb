"""Concurrent stock lookups

One Inventory Gateway request per distinct product, all in flight at
once. A failing or slow request never affects the others.
"""

import asyncio
import logging
from typing import Iterable, Union
from src.app.services.errors import StockFetchError
from src.app.services.inventory_gateway import InventoryGateway

logger = logging.getLogger(__name__)

StockOutcome = Union[int, StockFetchError]


async def fetch_stock_levels(
    gateway: InventoryGateway,
    product_ids: Iterable[str],
) -> dict[str, StockOutcome]:
    """
    Fetch current stock for every distinct product concurrently

    Args:
        gateway: Inventory gateway
        product_ids: Product ids (duplicates are queried once)

    Returns:
        Mapping of product id to current stock, or to the StockFetchError
        that prevented reading it
    """
    distinct_ids = list(dict.fromkeys(product_ids))
    if not distinct_ids:
        return {}

    outcomes = await asyncio.gather(
        *(gateway.get_current_stock(product_id) for product_id in distinct_ids),
        return_exceptions=True,
    )

    levels: dict[str, StockOutcome] = {}
    for product_id, outcome in zip(distinct_ids, outcomes):
        if isinstance(outcome, StockFetchError):
            levels[product_id] = outcome
        elif isinstance(outcome, Exception):
            levels[product_id] = StockFetchError(product_id, str(outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            levels[product_id] = max(int(outcome), 0)

    failed = [pid for pid, level in levels.items() if isinstance(level, StockFetchError)]
    if failed:
        logger.warning(f"Stock lookup failed for {len(failed)}/{len(distinct_ids)} products: {failed}")
    return levels
