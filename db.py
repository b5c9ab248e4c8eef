import logging
import requests
import streamlit as st
from supabase import create_client

from config import CONFIG, get_credentials

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Any failure reported by the hosted database/storage service."""


def _message(exc) -> str:
    msg = getattr(exc, "message", None)
    if not msg and exc.args and isinstance(exc.args[0], dict):
        msg = exc.args[0].get("message")
    return str(msg or exc)


@st.cache_resource(show_spinner=False)
def get_client():
    url, key = get_credentials(st.secrets)
    if not url or not key:
        raise StorageError("Supabase credentials missing: set SUPABASE_URL and SUPABASE_KEY")
    return create_client(url, key)


def fetch_items(client, table=None) -> list[dict]:
    table = table or CONFIG["table_name"]
    try:
        res = client.table(table).select("*").execute()
    except Exception as e:
        raise StorageError(_message(e)) from e
    rows = getattr(res, "data", None) or []
    logger.info(f"Fetched {len(rows)} row(s) from '{table}'")
    return rows


def insert_item(client, row: dict, table=None) -> dict:
    table = table or CONFIG["table_name"]
    try:
        res = client.table(table).insert([row]).execute()
    except Exception as e:
        raise StorageError(_message(e)) from e
    rows = getattr(res, "data", None) or []
    logger.info(f"Inserted '{row.get('inventory_code')}' into '{table}'")
    return rows[0] if rows else row


def upload_media(client, bucket: str, path: str, data: bytes, content_type: str | None = None):
    options = {"content-type": content_type} if content_type else None
    try:
        if options:
            client.storage.from_(bucket).upload(path, data, file_options=options)
        else:
            client.storage.from_(bucket).upload(path, data)
    except Exception as e:
        raise StorageError(_message(e)) from e
    logger.info(f"Uploaded {len(data)} bytes to {bucket}/{path}")


def get_public_url(client, bucket: str, path: str) -> str:
    try:
        url = client.storage.from_(bucket).get_public_url(path)
    except Exception as e:
        raise StorageError(_message(e)) from e
    # older clients return {"publicURL": ...}
    if isinstance(url, dict):
        url = url.get("publicUrl") or url.get("publicURL") or ""
    return str(url).rstrip("?")


def fetch_media_bytes(url: str, timeout: int = 30) -> bytes:
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise StorageError(f"Download failed: {e}") from e
    return resp.content


def remove_media(client, bucket: str, paths: list[str]):
    try:
        client.storage.from_(bucket).remove(paths)
    except Exception as e:
        raise StorageError(_message(e)) from e
    logger.info(f"Removed {len(paths)} object(s) from {bucket}")
