"""Appliance database model."""

from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wattboard.core.database import Base

if TYPE_CHECKING:
    from wattboard.models.user import User


class Appliance(Base):
    """One appliance in a user's current household inventory."""

    __tablename__ = "appliances"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    name: Mapped[str] = mapped_column(String(100))
    power_consumption: Mapped[float] = mapped_column(Float)  # Watts
    hours: Mapped[float] = mapped_column(Float)  # Hours of use per day

    # Relationships
    user: Mapped["User"] = relationship(back_populates="appliances")
