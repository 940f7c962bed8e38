# /gradebook/routers/stats_router.py

# --- Core FastAPI Imports ---
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

# --- Service and Model Imports ---
from ..core import config
from ..core.errors import RecordNotFoundError
from ..models import stats_model
from ..services import stats_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get(
    "/summary",
    response_model=stats_model.DashboardSummary,
    summary="Get Dashboard Summary",
    description="Totals, average GPA and grade distribution for the dashboard, optionally for a single run.",
)
def get_dashboard_summary(run_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    # Thin router: all aggregation lives in the stats service.
    return stats_service.get_dashboard_summary(db=db, run_id=run_id)


@router.get("/classes/{section_id}/distribution", response_model=stats_model.GradeDistributionResponse, summary="Get a Class's Grade Distribution")
def get_class_distribution(section_id: int, db: DatabaseService = Depends(get_db_service)):
    try:
        return stats_service.get_section_distribution(db, section_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/groups/{group_id}/distribution", response_model=stats_model.GradeDistributionResponse, summary="Get a Group's Grade Distribution")
def get_group_distribution(group_id: int, db: DatabaseService = Depends(get_db_service)):
    try:
        return stats_service.get_group_distribution(db, group_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get(
    "/runs/{run_id}/z-scores",
    response_model=stats_model.ZScoreReport,
    summary="Get Section and Group Z-Scores for a Run",
)
def get_run_z_scores(
    run_id: int,
    threshold: Optional[float] = Query(default=None, gt=0, description="Flag entries with |z| at or above this value."),
    db: DatabaseService = Depends(get_db_service),
):
    try:
        return stats_service.get_run_z_scores(db, run_id, threshold or config.Z_SCORE_THRESHOLD)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/good-list", response_model=List[stats_model.GoodListEntry], summary="Get Students with A / A- Grades")
def get_good_list(run_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    return stats_service.get_good_list(db, run_id=run_id)


@router.get("/work-list", response_model=List[stats_model.WorkListEntry], summary="Get Students with D / F Grades")
def get_work_list(run_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    return stats_service.get_work_list(db, run_id=run_id)
