import re, time, logging

import db
from config import CONFIG

logger = logging.getLogger(__name__)

MSG_CODE_REQUIRED = "Please enter an inventory code"
MSG_PRICE_NEGATIVE = "Price cannot be negative"
MSG_QTY_NEGATIVE = "Available quantity cannot be negative"

FORM_DEFAULTS = {
    "inventory_code": "",
    "strain_name": "",
    "available": 0.0,
    "pricing": 0.0,
}


def _num(x) -> float:
    if x is None or x == "":
        return 0.0
    return float(x)


def validate_submission(code, available, pricing):
    """First failing check as a message, or None when the submission is valid."""
    if not code:
        return MSG_CODE_REQUIRED
    if _num(pricing) < 0:
        return MSG_PRICE_NEGATIVE
    if _num(available) < 0:
        return MSG_QTY_NEGATIVE
    return None


def storage_path(folder: str, filename: str, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    safe = re.sub(r"\s+", "-", filename)
    return f"{folder}/{now_ms}-{safe}"


def _file_parts(upload):
    """(name, bytes, content type) from a Streamlit UploadedFile or a plain tuple."""
    if isinstance(upload, tuple):
        name, data = upload[0], upload[1]
        ctype = upload[2] if len(upload) > 2 else None
        return name, data, ctype
    return upload.name, upload.getvalue(), getattr(upload, "type", None)


def _store(client, bucket, folder, upload, now_ms):
    name, data, ctype = _file_parts(upload)
    path = storage_path(folder, name, now_ms)
    db.upload_media(client, bucket, path, data, ctype)
    return path, db.get_public_url(client, bucket, path)


def _cleanup(client, uploaded):
    for bucket, path in uploaded:
        try:
            db.remove_media(client, bucket, [path])
        except db.StorageError as e:
            logger.warning(f"Could not remove orphaned {bucket}/{path}: {e}")


def submit_item(client, submission: dict, cfg=None, clock=None):
    """Upload media, then insert the record.

    Returns ``(ok, message)``. Failures never propagate: validation errors are
    returned before any network call, service errors are returned with the
    service's message. Uploads already stored when the insert fails stay in
    storage unless ``cleanup_orphans`` is enabled.
    """
    cfg = cfg or CONFIG
    clock = clock or (lambda: int(time.time() * 1000))

    code = submission.get("inventory_code") or ""
    available = submission.get("available")
    pricing = submission.get("pricing")
    err = validate_submission(code, available, pricing)
    if err:
        return False, err

    video_url = photo_url = None
    uploaded = []

    if submission.get("video") is not None:
        try:
            path, video_url = _store(client, cfg["video_bucket"], "videos", submission["video"], clock())
        except db.StorageError as e:
            logger.error(f"Video upload failed for '{code}': {e}")
            return False, f"Video upload failed: {e}"
        uploaded.append((cfg["video_bucket"], path))

    if submission.get("photo") is not None:
        try:
            path, photo_url = _store(client, cfg["photo_bucket"], "photos", submission["photo"], clock())
        except db.StorageError as e:
            logger.error(f"Image upload failed for '{code}': {e}")
            return False, f"Image upload failed: {e}"
        uploaded.append((cfg["photo_bucket"], path))

    row = {
        "inventory_code": code,
        "available": _num(available),
        "pricing": _num(pricing),
        "strain_name": submission.get("strain_name") or None,
        "video_path": video_url,
        "photo_url": photo_url,
    }
    try:
        db.insert_item(client, row, cfg["table_name"])
    except db.StorageError as e:
        logger.error(f"Database insert failed for '{code}': {e}")
        if uploaded:
            if cfg.get("cleanup_orphans"):
                _cleanup(client, uploaded)
            else:
                logger.warning(f"Insert failed after upload; {len(uploaded)} orphaned object(s) left in storage")
        return False, f"Database insert failed: {e}"

    return True, f"Saved item '{code}'"
