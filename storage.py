import os
import time
import logging

from sqlalchemy.orm import Session

import crud
from models import Image

logger = logging.getLogger(__name__)


def ensure_dir(path: str) -> None:
    """Create ``path`` if missing. An existing directory is not an error."""
    os.makedirs(path, exist_ok=True)


def clean_filename(filename: str) -> str:
    # keep only the last path component of whatever the client sent
    name = os.path.basename(filename.replace("\\", "/")).strip()
    return name or "upload"


def _now_millis() -> int:
    return int(time.time() * 1000)


def storage_name(millis: int, filename: str) -> str:
    return f"{millis}-{filename}"


def public_path(content_root: str, name: str) -> str:
    return f"{content_root.rstrip('/')}/{name}"


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Could not remove staged file {path}: {e}")


def stage_file(data: bytes, filename: str, upload_dir: str, staging_dir: str):
    """
    Write ``data`` into the staging directory under a name that is free in
    both the staging and the upload directory.

    The name is ``<millisecond-timestamp>-<filename>``. When it is taken, the
    timestamp is advanced one millisecond at a time until an exclusive create
    succeeds, so two uploads never share a file.

    The staged file is created before the upload directory is checked. A
    staged name only disappears when ``os.replace`` publishes it, so once the
    exclusive create succeeds any earlier holder of the name is already
    visible in the upload directory.

    Returns (name, staged_path).
    """
    millis = _now_millis()
    while True:
        name = storage_name(millis, filename)
        staged_path = os.path.join(staging_dir, name)

        try:
            f = open(staged_path, "xb")
        except FileExistsError:
            millis += 1
            continue

        if os.path.exists(os.path.join(upload_dir, name)):
            f.close()
            _discard(staged_path)
            millis += 1
            continue

        try:
            with f:
                f.write(data)
        except Exception:
            _discard(staged_path)
            raise

        return name, staged_path


def save_upload(
    db: Session,
    title: str,
    filename: str,
    data: bytes,
    upload_dir: str,
    staging_dir: str,
    content_root: str,
) -> Image:
    """
    Persist an uploaded image and record its metadata.

    Steps:
      - Make sure the upload and staging directories exist
      - Stage the binary under a unique name outside the served directory
      - Commit the metadata record
      - Move the staged file into the upload directory

    A failed commit removes the staged file. A failed move removes both the
    record and the staged file. Either way the original error is re-raised.
    """
    # --- STEP 1: Directories ---
    ensure_dir(upload_dir)
    ensure_dir(staging_dir)

    # --- STEP 2: Stage ---
    name, staged_path = stage_file(data, clean_filename(filename), upload_dir, staging_dir)
    image_path = public_path(content_root, name)

    # --- STEP 3: Commit metadata ---
    try:
        img = crud.create_image(db, title=title, image_path=image_path)
    except Exception:
        _discard(staged_path)
        raise

    # --- STEP 4: Finalize ---
    try:
        os.replace(staged_path, os.path.join(upload_dir, name))
    except Exception:
        logger.error(f"Finalizing {name} failed, removing record ID={img.id}")
        try:
            crud.delete_image(db, img)
        finally:
            _discard(staged_path)
        raise

    logger.info(f"Stored {image_path} ({len(data)} bytes) as ID={img.id}")
    return img
