"""
Tables of the local client store.
"""

from sqlalchemy import Column, Text, TIMESTAMP
from sqlalchemy.sql import func

from domain.models.database import Base


class AuthToken(Base):
    """Named auth token (access or refresh)"""

    __tablename__ = "auth_token"

    name = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class StoredCart(Base):
    """Serialized cart, one row per cart key"""

    __tablename__ = "stored_cart"

    cart_key = Column(Text, primary_key=True)
    coffee_shop_id = Column(Text)
    payload = Column(Text, nullable=False)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
