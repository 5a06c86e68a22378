from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from booking_pipeline.platform.database.orm_db_setting import Base


class InventoryDecrementLogModel(Base):
    """One row per applied decrement; booking_id makes replays no-ops."""

    __tablename__ = 'inventory_decrement_log'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('event_inventory.id'), nullable=False, index=True
    )
    ticket_count: Mapped[int] = mapped_column(Integer, nullable=False)
    remaining_after: Mapped[int] = mapped_column(Integer, nullable=False)
    oversold_by: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
