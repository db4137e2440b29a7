"""Energy summary database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wattboard.core.database import Base

if TYPE_CHECKING:
    from wattboard.models.user import User


class EnergySummary(Base):
    """Consumption derived from a user's current appliances, one row per user."""

    __tablename__ = "user_energy_summary"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), primary_key=True)
    daily_consumption: Mapped[float] = mapped_column(Float, default=0.0)  # kWh
    monthly_consumption: Mapped[float] = mapped_column(Float, default=0.0)  # kWh
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="energy_summary")
