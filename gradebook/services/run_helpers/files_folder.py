# /gradebook/services/run_helpers/files_folder.py

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

FILES_FOLDER_NAME = "files"


def files_folder_path(base_dir: Union[str, Path]) -> Path:
    return Path(base_dir) / FILES_FOLDER_NAME


def check_files_folder(base_dir: Union[str, Path]) -> bool:
    """True when `<base_dir>/files` exists."""
    path = files_folder_path(base_dir)
    exists = path.is_dir()
    logger.info("Files folder '%s' exists: %s", path, exists)
    return exists


def create_files_folder(base_dir: Union[str, Path]) -> bool:
    """Creates `<base_dir>/files` (and parents). Returns False if the OS refuses."""
    path = files_folder_path(base_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Failed to create files folder '%s': %s", path, e)
        return False
    logger.info("Successfully created files folder: %s", path)
    return True


def ensure_files_folder(base_dir: Union[str, Path]) -> bool:
    return check_files_folder(base_dir) or create_files_folder(base_dir)
