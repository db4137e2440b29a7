"""Energy Pydantic schemas for appliances, summaries and the leaderboard.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wattboard.models.enums import Badge


class ApplianceCreate(BaseModel):
    """Schema for one submitted appliance.

    Missing, null or negative power and hours count as zero; infinity and NaN
    are rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    power_consumption: float = Field(default=0.0, alias="powerConsumption", allow_inf_nan=False)
    hours: float = Field(default=0.0, allow_inf_nan=False)

    @field_validator("power_consumption", "hours", mode="before")
    @classmethod
    def default_missing_to_zero(cls, v: float | None) -> float:
        """Treat null as zero."""
        return 0.0 if v is None else v

    @field_validator("power_consumption", "hours")
    @classmethod
    def clamp_non_negative(cls, v: float) -> float:
        """Clamp negative values so aggregates never go below zero."""
        return max(v, 0.0)


class ApplianceResponse(BaseModel):
    """Schema for a stored appliance."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    name: str
    power_consumption: float = Field(alias="powerConsumption")
    hours: float


class ApplianceSubmission(BaseModel):
    """Request body replacing a user's appliance list."""

    appliances: list[ApplianceCreate] | None = None


class ApplianceListResponse(BaseModel):
    appliances: list[ApplianceResponse]


class EnergySummaryResponse(BaseModel):
    """Daily and monthly consumption in kWh."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    daily_consumption: float = Field(alias="dailyConsumption")
    monthly_consumption: float = Field(alias="monthlyConsumption")
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")


class SummaryEnvelope(BaseModel):
    summary: EnergySummaryResponse


class ApplianceSubmissionResponse(BaseModel):
    success: bool
    message: str
    summary: EnergySummaryResponse


class LeaderboardEntry(BaseModel):
    """One ranked user on the leaderboard."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    daily_consumption: float = Field(alias="dailyConsumption")
    monthly_consumption: float = Field(alias="monthlyConsumption")
    savings_percentage: float = Field(alias="savingsPercentage")
    energy_saved: float = Field(alias="energySaved")
    badge: Badge


class LeaderboardResponse(BaseModel):
    """Ranked users plus the average monthly consumption they were compared with."""

    model_config = ConfigDict(populate_by_name=True)

    leaderboard: list[LeaderboardEntry]
    average_consumption: float = Field(alias="averageConsumption")
