from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from booking_pipeline.platform.database.orm_db_setting import Base


class VenueModel(Base):
    __tablename__ = 'venue'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    total_capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self):
        return f'<VenueModel(id={self.id}, name={self.name})>'
