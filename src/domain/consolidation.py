"""Cart consolidation rule

Merges raw cart entries sharing (product_key, employee) into a single
ConsolidatedLineItem. Pure function: no I/O, no stock lookups.
"""

from datetime import datetime, time
from typing import Iterable, Optional, Sequence
from src.domain.line_item import ConsolidatedLineItem, LineItem


def _merged_stock(stocks: list[Optional[int]]) -> int:
    known = [s for s in stocks if s is not None]
    return min(known) if known else 0


# Older clients stored locale time strings such as "9:15:00 AM"
TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%I:%M:%S %p", "%I:%M %p")


def _parse_time(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    return None


def _placed_at(item: LineItem) -> tuple[str, time]:
    """Sort key for when an entry was added; undated entries sort last"""
    return (item.order_date or "9999-12-31", _parse_time(item.order_time) or time.max)


def merge_line_items(items: Iterable[LineItem]) -> list[ConsolidatedLineItem]:
    """
    Group entries by consolidation key and fold each group into one item

    Per group:
    - quantity is the sum of the group's quantities
    - stock is the minimum known stock (0 when none is known)
    - original_ids concatenates every contributing raw id, in input order
    - order date/time are the earliest in the group (first entry on ties
      or when nothing is dated)
    - every other field comes from the first entry of the group

    Input order of first appearance is preserved. Feeding the output back
    in returns an equal list.
    """
    groups: dict[str, list[LineItem]] = {}
    for item in items:
        groups.setdefault(item.consolidation_key, []).append(item)

    merged: list[ConsolidatedLineItem] = []
    for entries in groups.values():
        first = entries[0]
        earliest = min(entries, key=_placed_at)
        original_ids: list[str] = []
        for entry in entries:
            original_ids.extend(entry.contributing_ids)

        merged.append(
            ConsolidatedLineItem(
                **first.model_dump(exclude={"quantity", "stock", "original_ids", "order_date", "order_time"}),
                order_date=earliest.order_date,
                order_time=earliest.order_time,
                quantity=sum(entry.quantity for entry in entries),
                stock=_merged_stock([entry.stock for entry in entries]),
                original_ids=original_ids,
            )
        )
    return merged


def find_line_item(
    items: Sequence[ConsolidatedLineItem], line_item_id: str
) -> Optional[ConsolidatedLineItem]:
    """Locate a consolidated item by its id or by any id folded into it"""
    for item in items:
        if item.entry_id == line_item_id:
            return item
    for item in items:
        if line_item_id in item.original_ids:
            return item
    return None


def replace_entries(items: Iterable[LineItem], replacement: ConsolidatedLineItem) -> list[LineItem]:
    """
    Swap every stored entry folded into `replacement` for `replacement`

    The replacement takes the position of the first entry it absorbs.
    """
    absorbed = set(replacement.original_ids)
    result: list[LineItem] = []
    inserted = False
    for entry in items:
        if entry.entry_id in absorbed:
            if not inserted:
                result.append(replacement)
                inserted = True
            continue
        result.append(entry)
    if not inserted:
        result.append(replacement)
    return result
