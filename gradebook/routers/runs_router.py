# /gradebook/routers/runs_router.py

import logging
from fastapi import APIRouter, Depends, HTTPException, status, Response
from typing import List

from ..core.errors import RecordNotFoundError, DuplicateRunError, RunFileError
from ..models import run_model, stats_model
from ..services import run_service, gpa_service
from ..services.database_service import DatabaseService, get_db_service

logger = logging.getLogger(__name__)

router = APIRouter()

# --- RUN COLLECTION ENDPOINTS (/api/runs) ---

@router.get("", response_model=List[run_model.RunSummary], summary="Get All Runs with Group Counts")
def get_all_runs(db: DatabaseService = Depends(get_db_service)):
    return run_service.list_runs(db)

# --- FILES FOLDER ---

@router.get("/files-folder", response_model=run_model.FilesFolderStatus, summary="Check the Import Files Folder")
def check_files_folder():
    return run_service.get_files_folder_status()

@router.post("/files-folder", response_model=run_model.FilesFolderStatus, status_code=status.HTTP_201_CREATED, summary="Create the Import Files Folder")
def create_files_folder():
    try:
        return run_service.create_files_folder()
    except OSError as e:
        logger.error("Error creating files folder: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

# --- IMPORT ENDPOINTS ---

@router.post("/validate", response_model=run_model.RunValidationResult, summary="Validate a .RUN File")
def validate_run_file(payload: run_model.RunFileRequest):
    """
    Checks that the .RUN file and every GRP / SEC file it references exist and
    are well formed. Always returns 200; `valid` carries the verdict.
    """
    return run_service.validate_run_file(payload.run_file_path)

@router.post("/import", response_model=run_model.RunImportResponse, status_code=status.HTTP_201_CREATED, summary="Import a .RUN File")
def import_run_file(payload: run_model.RunFileRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        return run_service.import_run(db, payload.run_file_path)
    except DuplicateRunError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except RunFileError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

# --- INDIVIDUAL RUN ENDPOINTS (/api/runs/{run_id}) ---

@router.post("/{run_id}/recompute", response_model=stats_model.RecomputeResponse, summary="Recompute a Run's GPAs")
def recompute_run(run_id: int, db: DatabaseService = Depends(get_db_service)):
    try:
        return gpa_service.recompute_run_gpas(db, run_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.delete("/{run_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Wipe a Run")
def wipe_run(run_id: int, db: DatabaseService = Depends(get_db_service)):
    try:
        run_service.wipe_run(db, run_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
