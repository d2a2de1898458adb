"""Cart Slot Domain Entity

Durable, session-scoped key-value slot holding the serialized list of
raw line items. One row per (session_id, slot_name).
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import String, Text
from src.domain.base import BaseModel


class CartSlot(BaseModel, table=True):
    """
    Cart Slot - Serialized cart for one session

    Domain Rules:
    - Exactly one row per (session_id, slot_name)
    - payload is a JSON array of LineItem store dicts
    - Deleting the row empties the cart in a single statement
    """

    __tablename__ = "cart_slots"

    session_id: str = Field(
        sa_column=Column(String(255), primary_key=True),
        description="Client session identifier"
    )

    slot_name: str = Field(
        sa_column=Column(String(100), primary_key=True),
        description="Named slot (e.g., 'shoppingCart')"
    )

    payload: str = Field(
        sa_column=Column(Text, nullable=False, default="[]"),
        description="JSON array of line items"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last write timestamp"
    )
