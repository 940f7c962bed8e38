# /gradebook/routers/records_router.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from ..core.errors import RecordNotFoundError
from ..models import student_model, section_model, group_model
from ..services import records_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

# --- BULK FETCH ENDPOINTS ---
# One SQL join each, grouped into nested records by the service layer.

@router.get("/fetch-all-student-info", response_model=List[student_model.StudentRecord], summary="Get All Students with Grades")
def fetch_all_student_info(run_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    return records_service.list_students(db, run_id=run_id)

@router.get("/fetch-all-class-info", response_model=List[section_model.SectionRecord], summary="Get All Classes with Students")
def fetch_all_class_info(run_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    return records_service.list_sections(db, run_id=run_id)

@router.get("/fetch-all-group-info", response_model=List[group_model.GroupRecord], summary="Get All Groups with Classes")
def fetch_all_group_info(run_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    return records_service.list_groups(db, run_id=run_id)

@router.get("/fetch-all-grade-records", response_model=List[student_model.GradeRow], summary="Get Flattened Grade Records")
def fetch_all_grade_records(run_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    return records_service.list_grade_rows(db, run_id=run_id)

# --- SPECIFIC LOOKUPS ---

@router.get("/students/{student_id}", response_model=student_model.StudentRecord, summary="Get a Single Student")
def get_student(student_id: str, run_id: Optional[int] = None, db: DatabaseService = Depends(get_db_service)):
    try:
        return records_service.get_student(db, student_id, run_id=run_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.get("/classes/{section_id}", response_model=section_model.SectionRecord, summary="Get a Single Class")
def get_class(section_id: int, db: DatabaseService = Depends(get_db_service)):
    try:
        return records_service.get_section(db, section_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.get("/groups/{group_id}", response_model=group_model.GroupRecord, summary="Get a Single Group")
def get_group(group_id: int, db: DatabaseService = Depends(get_db_service)):
    try:
        return records_service.get_group(db, group_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

# --- UPDATE ENDPOINTS ---

@router.put("/update-student/{student_id}", response_model=student_model.StudentRecord, summary="Update a Student")
def update_student(
    student_id: str,
    student_update: student_model.StudentUpdate,
    run_id: Optional[int] = None,
    db: DatabaseService = Depends(get_db_service),
):
    try:
        return records_service.update_student(db, student_id, student_update, run_id=run_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.put("/update-class/{section_id}", response_model=section_model.SectionRecord, summary="Update a Class")
def update_class(section_id: int, section_update: section_model.SectionUpdate, db: DatabaseService = Depends(get_db_service)):
    try:
        return records_service.update_section(db, section_id, section_update)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.put("/update-group/{group_id}", response_model=group_model.GroupRecord, summary="Update a Group")
def update_group(group_id: int, group_update: group_model.GroupUpdate, db: DatabaseService = Depends(get_db_service)):
    try:
        return records_service.update_group(db, group_id, group_update)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
