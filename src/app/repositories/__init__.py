from .line_item_store import LineItemStore

__all__ = [
    "LineItemStore",
]
