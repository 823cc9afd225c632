"""Delivery locations and the location groups that variant prices are keyed by."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy import UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship


class LocationGroup(Base):
    """A set of locations sharing one price book (e.g., 'Metro cities')."""

    __tablename__ = "store_location_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    locations = relationship("Location", back_populates="location_group")

    def __repr__(self):
        return f"<LocationGroup {self.name}>"


class Location(Base):
    """A deliverable postal code."""

    __tablename__ = "store_locations"
    __table_args__ = (
        UniqueConstraint("store_id", "pincode", name="uq_location_store_pincode"),
        CheckConstraint("delivery_days >= 1", name="positive_delivery_days"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    location_group_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("store_location_groups.id", ondelete="SET NULL"),
        nullable=True,
    )
    pincode: Mapped[str] = mapped_column(String(20), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    is_cod_available: Mapped[bool] = mapped_column(Boolean, default=False)
    delivery_days: Mapped[int] = mapped_column(Integer, default=1)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    location_group = relationship("LocationGroup", back_populates="locations")

    def __repr__(self):
        return f"<Location {self.pincode} {self.city}>"
