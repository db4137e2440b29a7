"""Appliance aggregation: daily/monthly consumption from a user's appliances."""

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from wattboard.core.database import storage_scope
from wattboard.core.exceptions import ValidationError
from wattboard.models.appliance import Appliance
from wattboard.models.energy_summary import EnergySummary
from wattboard.schemas.energy import ApplianceCreate, EnergySummaryResponse

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30
WATTS_PER_KILOWATT = 1000


def compute_consumption(appliances: Sequence[ApplianceCreate]) -> tuple[float, float]:
    """Return (daily, monthly) consumption in kWh.

    daily = sum(watts * hours) / 1000, monthly = daily * 30
    """
    watt_hours = sum(a.power_consumption * a.hours for a in appliances)
    daily = watt_hours / WATTS_PER_KILOWATT
    return daily, daily * DAYS_PER_MONTH


class ApplianceAggregator:
    """Stores a user's appliance list and the consumption summary derived from it."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def submit(
        self,
        user_id: int,
        appliances: Sequence[ApplianceCreate | Mapping] | None,
    ) -> EnergySummaryResponse:
        """
        Replace a user's appliances and recompute their summary.

        The delete, the inserts and the summary upsert commit together or
        not at all. None or an empty list clears the appliances and zeroes
        the summary. Items may be ApplianceCreate instances or plain mappings
        in the request shape (name, powerConsumption, hours).

        Raises:
            ValidationError: If appliances is not a list, an item is malformed,
                or the resulting consumption is not a finite number
            StorageError: If the transaction fails

        """
        if appliances is None:
            appliances = []
        if not isinstance(appliances, (list, tuple)):
            raise ValidationError("Invalid appliance data")

        try:
            items = [ApplianceCreate.model_validate(item) for item in appliances]
        except PydanticValidationError as e:
            raise ValidationError("Invalid appliance data") from e

        daily, monthly = compute_consumption(items)
        if not (math.isfinite(daily) and math.isfinite(monthly)):
            raise ValidationError("Appliance consumption is too large")
        now = datetime.now(UTC)

        with storage_scope(self.db, "save appliances"):
            self.db.query(Appliance).filter(Appliance.user_id == user_id).delete(
                synchronize_session="fetch"
            )
            self.db.add_all(
                Appliance(
                    user_id=user_id,
                    name=a.name,
                    power_consumption=a.power_consumption,
                    hours=a.hours,
                )
                for a in items
            )

            summary = self.db.get(EnergySummary, user_id)
            if summary is None:
                summary = EnergySummary(user_id=user_id)
                self.db.add(summary)
            summary.daily_consumption = daily
            summary.monthly_consumption = monthly
            summary.last_updated = now

            self.db.commit()

        logger.info(
            "Saved %d appliances for user id=%s (%.3f kWh/day)",
            len(items),
            user_id,
            daily,
        )
        return EnergySummaryResponse(
            daily_consumption=daily,
            monthly_consumption=monthly,
            last_updated=now,
        )

    def list_appliances(self, user_id: int) -> list[Appliance]:
        with storage_scope(self.db, "load appliances"):
            return (
                self.db.query(Appliance)
                .filter(Appliance.user_id == user_id)
                .order_by(Appliance.id)
                .all()
            )

    def get_summary(self, user_id: int) -> EnergySummaryResponse:
        """Get the stored summary, or zeros if the user never submitted appliances."""
        with storage_scope(self.db, "load energy summary"):
            summary = self.db.get(EnergySummary, user_id)
        if summary is None:
            return EnergySummaryResponse(daily_consumption=0.0, monthly_consumption=0.0)
        return EnergySummaryResponse.model_validate(summary)
