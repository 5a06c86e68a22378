from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booking_pipeline.platform.database.orm_db_setting import Base

if TYPE_CHECKING:
    from booking_pipeline.service.inventory.driven_adapter.model.venue_model import VenueModel


class EventInventoryModel(Base):
    __tablename__ = 'event_inventory'
    __table_args__ = (
        CheckConstraint('remaining_capacity >= 0', name='ck_event_inventory_remaining_non_negative'),
        CheckConstraint('ticket_price >= 0', name='ck_event_inventory_price_non_negative'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    venue_id: Mapped[int] = mapped_column(Integer, ForeignKey('venue.id'), nullable=False)
    total_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    remaining_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    ticket_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Relationships
    venue: Mapped['VenueModel'] = relationship('VenueModel', foreign_keys=[venue_id], lazy='selectin')
