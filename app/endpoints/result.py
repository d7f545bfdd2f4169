from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.schemas.analytics import LeaderboardEntry, UserStatistics
from app.schemas.response import APIResponse
from app.schemas.result import Result, ResultPage, ResultSubmit
from app.schemas.user import UserContext
from app.services.analytics import analytics_service
from app.services.result import result_service
from app.services.submission import submission_service
from app.utils import deps

router = APIRouter()

@router.post(
    "/submit",
    response_model=APIResponse[Result],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.rate_limit("test_taking"))]
)
async def submit_result(
    *,
    db: Session = Depends(deps.get_db),
    submission_in: ResultSubmit,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    result = submission_service.submit(db, submission_in=submission_in, current_user_context=context)
    return APIResponse(message="Result submitted successfully", data=Result.model_validate(result))


@router.get("/my-results", response_model=APIResponse[ResultPage])
async def get_my_results(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.RESULTS_PAGE_SIZE, ge=1, le=100),
    test: Optional[int] = Query(None)
):
    results = result_service.list_user_results(db, current_user_context=context, page=page, limit=limit, test_id=test)
    return APIResponse(message="Results retrieved successfully", data=results)


@router.get("/statistics", response_model=APIResponse[UserStatistics])
async def get_statistics(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    days: int = Query(settings.STATISTICS_DEFAULT_DAYS, ge=1, le=3650)
):
    statistics = analytics_service.get_user_statistics(db, current_user_context=context, days=days)
    return APIResponse(message="Statistics retrieved successfully", data=statistics)


@router.get(
    "/leaderboard",
    response_model=APIResponse[List[LeaderboardEntry]],
    dependencies=[Depends(deps.rate_limit_by_ip("general"))]
)
async def get_leaderboard(
    db: Session = Depends(deps.get_db),
    limit: int = Query(settings.LEADERBOARD_DEFAULT_LIMIT, ge=1, le=100),
    days: int = Query(settings.LEADERBOARD_DEFAULT_DAYS, ge=1, le=3650)
):
    leaderboard = analytics_service.get_leaderboard(db, limit=limit, days=days)
    return APIResponse(message="Leaderboard retrieved successfully", data=leaderboard)


@router.get("/{result_id}", response_model=APIResponse[Result])
async def get_result(
    *,
    db: Session = Depends(deps.get_db),
    result_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    result = result_service.get_result(db, result_id=result_id, current_user_context=context)
    return APIResponse(message="Result retrieved successfully", data=Result.model_validate(result))
