"""Database models."""

from wattboard.models.appliance import Appliance
from wattboard.models.energy_summary import EnergySummary
from wattboard.models.user import User

__all__ = ["Appliance", "EnergySummary", "User"]
