# /gradebook/services/run_service.py

"""
This service module is the facade for everything run related: listing runs,
validating and importing .RUN files, wiping a run and the files folder used
to stage imports. It orchestrates the specialist helpers in `run_helpers`.
"""

import logging
from typing import List, Dict, Optional

from ..core import config
from ..core.errors import RecordNotFoundError
from ..models.run_model import RunValidationResult
from .database_service import DatabaseService
from .run_helpers import files_folder, run_file_parser, run_importer

logger = logging.getLogger(__name__)


def list_runs(db: DatabaseService) -> List[Dict]:
    return [
        {
            "run_id": row.run_id,
            "run_name": row.run_name,
            "group_count": row.group_count,
            "created_at": row.created_at,
        }
        for row in db.get_all_runs()
    ]


def validate_run_file(run_file_path: str) -> RunValidationResult:
    return run_file_parser.validate_run_file(run_file_path)


def import_run(db: DatabaseService, run_file_path: str) -> Dict:
    """
    Parses the .RUN file (raising `RunFileError` if it is invalid) and stores
    the run together with its GPAs in one transaction.
    """
    parsed = run_file_parser.parse_run_file(run_file_path)
    return run_importer.import_parsed_run(db, parsed)


def wipe_run(db: DatabaseService, run_id: int) -> Dict[str, int]:
    if db.get_run_by_id(run_id) is None:
        raise RecordNotFoundError(f"Run with ID {run_id} not found")
    deleted = db.delete_run_cascade(run_id)
    logger.info("Wiped run %s: %s", run_id, deleted)
    return deleted


def get_files_folder_status(base_dir: Optional[str] = None) -> Dict:
    base_dir = base_dir or config.RUN_FILES_DIR
    return {
        "path": str(files_folder.files_folder_path(base_dir)),
        "exists": files_folder.check_files_folder(base_dir),
    }


def create_files_folder(base_dir: Optional[str] = None) -> Dict:
    base_dir = base_dir or config.RUN_FILES_DIR
    if not files_folder.create_files_folder(base_dir):
        raise OSError(f"Could not create files folder under {base_dir}")
    return get_files_folder_status(base_dir)
