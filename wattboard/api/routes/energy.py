"""Energy routes for appliances, consumption summary and leaderboard."""

from fastapi import APIRouter, Depends

from wattboard.api.dependencies import (
    get_appliance_aggregator,
    get_current_token,
    get_leaderboard_ranker,
)
from wattboard.schemas.energy import (
    ApplianceListResponse,
    ApplianceResponse,
    ApplianceSubmission,
    ApplianceSubmissionResponse,
    LeaderboardResponse,
    SummaryEnvelope,
)
from wattboard.schemas.user import TokenData
from wattboard.services.energy import ApplianceAggregator
from wattboard.services.leaderboard import LeaderboardRanker

router = APIRouter(prefix="/energy", tags=["energy"])


@router.get("/appliances", response_model=ApplianceListResponse)
def list_appliances(
    token_data: TokenData = Depends(get_current_token),
    aggregator: ApplianceAggregator = Depends(get_appliance_aggregator),
) -> ApplianceListResponse:
    """List the signed-in user's appliances."""
    appliances = aggregator.list_appliances(token_data.user_id)
    return ApplianceListResponse(
        appliances=[ApplianceResponse.model_validate(a) for a in appliances]
    )


@router.post("/appliances", response_model=ApplianceSubmissionResponse)
def submit_appliances(
    data: ApplianceSubmission,
    token_data: TokenData = Depends(get_current_token),
    aggregator: ApplianceAggregator = Depends(get_appliance_aggregator),
) -> ApplianceSubmissionResponse:
    """Replace the user's appliances and recompute their consumption."""
    summary = aggregator.submit(token_data.user_id, data.appliances)
    return ApplianceSubmissionResponse(
        success=True,
        message="Appliance data saved successfully",
        summary=summary,
    )


@router.get("/summary", response_model=SummaryEnvelope)
def get_summary(
    token_data: TokenData = Depends(get_current_token),
    aggregator: ApplianceAggregator = Depends(get_appliance_aggregator),
) -> SummaryEnvelope:
    """Get the user's daily and monthly consumption."""
    return SummaryEnvelope(summary=aggregator.get_summary(token_data.user_id))


@router.get("/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(
    token_data: TokenData = Depends(get_current_token),
    ranker: LeaderboardRanker = Depends(get_leaderboard_ranker),
) -> LeaderboardResponse:
    """Rank all users by savings against the average monthly consumption."""
    return ranker.compute_leaderboard()
