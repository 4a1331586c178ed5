import logging
import shutil
from pathlib import Path

from fastapi import HTTPException, UploadFile

from schoolhub.configs import settings
from schoolhub.utils.utils import make_attachment_filename

logger = logging.getLogger(__name__)


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_upload(file: UploadFile) -> str:
    """Write an uploaded file under the upload dir and return its stored filename."""
    file_name = make_attachment_filename(file.filename)
    target = upload_dir() / file_name
    try:
        with target.open("wb") as out:
            shutil.copyfileobj(file.file, out)
    except OSError as e:
        logger.error(f"Could not store attachment {file.filename}: {e}")
        raise HTTPException(status_code=500, detail="Server error")
    finally:
        file.file.close()
    return file_name


def delete_upload(file_name: str) -> None:
    try:
        (upload_dir() / file_name).unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove attachment {file_name}: {e}")

