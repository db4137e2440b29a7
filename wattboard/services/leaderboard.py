"""Leaderboard ranking by savings relative to the average household."""

from collections.abc import Iterable
from typing import NamedTuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from wattboard.core.database import storage_scope
from wattboard.models.energy_summary import EnergySummary
from wattboard.models.enums import Badge
from wattboard.models.user import User
from wattboard.schemas.energy import LeaderboardEntry, LeaderboardResponse

# Badges for the top three places; places 4-10 are savers, the rest new
PODIUM_BADGES = (Badge.ENERGY_CHAMPION, Badge.ENERGY_MASTER, Badge.ENERGY_EXPERT)
SAVER_CUTOFF = 10


class ConsumerRow(NamedTuple):
    username: str
    daily_consumption: float
    monthly_consumption: float


def badge_for_rank(index: int) -> Badge:
    """Badge for a zero-based leaderboard position."""
    if index < len(PODIUM_BADGES):
        return PODIUM_BADGES[index]
    if index < SAVER_CUTOFF:
        return Badge.ENERGY_SAVER
    return Badge.NEW


def savings_against(average: float, monthly: float) -> tuple[float, float]:
    """Return (savings percentage, kWh saved) of one user against the average.

    Both are zero when the user or the average consumes nothing.
    """
    if monthly == 0 or average == 0:
        return 0.0, 0.0
    saved = average - monthly
    return saved / average * 100, saved


def rank_consumers(rows: Iterable[ConsumerRow], average: float) -> list[LeaderboardEntry]:
    """Rank users by savings percentage, then by kWh saved, best first."""
    scored = []
    for row in rows:
        percentage, saved = savings_against(average, row.monthly_consumption)
        scored.append((percentage, saved, row))

    # sort is stable, so exact ties keep their input order
    scored.sort(key=lambda item: (item[0], item[1]), reverse=True)

    return [
        LeaderboardEntry(
            username=row.username,
            daily_consumption=row.daily_consumption,
            monthly_consumption=row.monthly_consumption,
            savings_percentage=round(percentage, 1),
            energy_saved=round(saved, 2),
            badge=badge_for_rank(index),
        )
        for index, (percentage, saved, row) in enumerate(scored)
    ]


class LeaderboardRanker:
    """Builds the leaderboard from every stored energy summary."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def compute_leaderboard(self) -> LeaderboardResponse:
        with storage_scope(self.db, "load leaderboard"):
            average = self.db.query(func.avg(EnergySummary.monthly_consumption)).scalar()
            results = (
                self.db.query(
                    User.username,
                    EnergySummary.daily_consumption,
                    EnergySummary.monthly_consumption,
                )
                .join(User, EnergySummary.user_id == User.id)
                .order_by(EnergySummary.user_id)
                .all()
            )

        average = float(average or 0.0)
        rows = [ConsumerRow(*result) for result in results]
        return LeaderboardResponse(
            leaderboard=rank_consumers(rows, average),
            average_consumption=average,
        )
