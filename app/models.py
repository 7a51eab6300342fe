# app/models.py
"""SQLAlchemy ORM models for persisted entities.

`User`, `Painting`, `Bid` and `AuctionSettings`. A painting's current price,
bidder count and the per-bid ranking are derived at query time in `crud` and
are not stored here.
"""
from sqlalchemy import (
    Column, Integer, Text, Numeric, Boolean, TIMESTAMP, ForeignKey, func, Index, text,
)
from sqlalchemy.orm import relationship
from .db import Base

BID_ACTIVE = "active"
PAINTING_ACTIVE = "active"
PAINTING_INACTIVE = "inactive"

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    mobile = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    bids = relationship("Bid", back_populates="user")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

class Painting(Base):
    __tablename__ = "paintings"
    id = Column(Integer, primary_key=True, index=True)
    artist_name = Column(Text, nullable=False)
    painting_name = Column(Text, nullable=False)
    image_url = Column(Text)
    base_price = Column(Numeric(12, 2), nullable=False)
    status = Column(Text, nullable=False, default=PAINTING_ACTIVE, server_default=PAINTING_ACTIVE)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    bids = relationship("Bid", back_populates="painting")

class Bid(Base):
    __tablename__ = "bids"
    id = Column(Integer, primary_key=True, index=True)
    painting_id = Column(Integer, ForeignKey("paintings.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    bid_amount = Column(Numeric(12, 2), nullable=False)
    bid_time = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    status = Column(Text, nullable=False, default=BID_ACTIVE, server_default=BID_ACTIVE)

    painting = relationship("Painting", back_populates="bids")
    user = relationship("User", back_populates="bids")

class AuctionSettings(Base):
    __tablename__ = "auction_settings"
    id = Column(Integer, primary_key=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(TIMESTAMP(timezone=True), nullable=False)
    end_date = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

# one active bid per (user, painting)
Index(
    "uq_bids_active_user_painting",
    Bid.painting_id,
    Bid.user_id,
    unique=True,
    postgresql_where=text("status = 'active'"),
    sqlite_where=text("status = 'active'"),
)
Index("idx_bids_painting_amount", Bid.painting_id, Bid.bid_amount)
Index("idx_paintings_status", Painting.status)
