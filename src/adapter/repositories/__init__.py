from .line_item_store import SqlAlchemyLineItemStore

__all__ = [
    "SqlAlchemyLineItemStore",
]
