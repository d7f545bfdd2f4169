from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.core.constants import SESSION_SKILLS, PracticeStatusEnum, PracticeTypeEnum
from app.schemas.practice_session import (
    ActiveSession, PracticeSession, PracticeSessionStart, PracticeSessionUpdate,
    SessionPage, SessionProgressResponse, SubmitAnswersRequest, SubmitAnswersResponse
)
from app.schemas.response import APIResponse
from app.schemas.user import UserContext
from app.services.practice_session import practice_session_service
from app.utils import deps

router = APIRouter()

@router.post(
    "/start",
    response_model=APIResponse[PracticeSession],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.rate_limit("test_taking"))]
)
async def start_session(
    *,
    request: Request,
    db: Session = Depends(deps.get_db),
    session_in: PracticeSessionStart,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    device_info = {
        "userAgent": request.headers.get("user-agent"),
        "ipAddress": request.client.host if request.client else None,
    }
    session = practice_session_service.start_session(
        db, session_in=session_in, current_user_context=context, device_info=device_info
    )
    return APIResponse(message="Practice session started successfully", data=PracticeSession.model_validate(session))


@router.get("/active", response_model=APIResponse[ActiveSession])
async def get_active_session(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    session = practice_session_service.get_active_session(db, current_user_context=context)
    return APIResponse(data=session)


@router.get("/sessions", response_model=APIResponse[SessionPage])
async def get_user_sessions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[PracticeStatusEnum] = Query(None, alias="status"),
    type: Optional[PracticeTypeEnum] = Query(None),
    skill: Optional[str] = Query(None, pattern=f"^({'|'.join(SESSION_SKILLS)})$"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate")
):
    sessions = practice_session_service.list_sessions(
        db,
        current_user_context=context,
        page=page,
        limit=limit,
        status=status_filter,
        type=type,
        skill=skill,
        start_date=start_date,
        end_date=end_date
    )
    return APIResponse(data=sessions)


@router.get("/sessions/{session_id}", response_model=APIResponse[PracticeSession])
async def get_session(
    *,
    db: Session = Depends(deps.get_db),
    session_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    session = practice_session_service.get_session(db, session_id=session_id, current_user_context=context)
    return APIResponse(data=PracticeSession.model_validate(session))


@router.get("/sessions/{session_id}/progress", response_model=APIResponse[SessionProgressResponse])
async def get_session_progress(
    *,
    db: Session = Depends(deps.get_db),
    session_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    progress = practice_session_service.compute_progress(db, session_id=session_id, current_user_context=context)
    return APIResponse(data=progress)


@router.put(
    "/sessions/{session_id}",
    response_model=APIResponse[PracticeSession],
    dependencies=[Depends(deps.rate_limit("test_taking"))]
)
async def update_session(
    *,
    db: Session = Depends(deps.get_db),
    session_id: int,
    session_in: PracticeSessionUpdate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    session = practice_session_service.update_session(
        db, session_id=session_id, session_in=session_in, current_user_context=context
    )
    return APIResponse(message="Practice session updated successfully", data=PracticeSession.model_validate(session))


@router.delete("/sessions/{session_id}", response_model=APIResponse[None])
async def delete_session(
    *,
    db: Session = Depends(deps.get_db),
    session_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    practice_session_service.delete_session(db, session_id=session_id, current_user_context=context)
    return APIResponse(message="Practice session deleted successfully")


@router.post(
    "/submit-answers",
    response_model=APIResponse[SubmitAnswersResponse],
    dependencies=[Depends(deps.rate_limit("test_taking"))]
)
async def submit_answers(
    *,
    db: Session = Depends(deps.get_db),
    request_in: SubmitAnswersRequest,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    response = practice_session_service.submit_answers(db, request_in=request_in, current_user_context=context)
    return APIResponse(message=f"{len(request_in.answers)} answers submitted successfully", data=response)
