"""Photo/video viewer state for a single inventory item.

The viewer is either closed (``None``) or a dict holding the open item, the
media kinds that item actually has, and the position of the one on screen.
Navigation only ever moves between kinds that are present.
"""
from urllib.parse import urlparse

PHOTO = "photo"
VIDEO = "video"

_FIELDS = {PHOTO: "photo_url", VIDEO: "video_path"}
_LABELS = {PHOTO: "Photo", VIDEO: "Video"}


def media_kinds(item: dict) -> list[str]:
    return [k for k in (PHOTO, VIDEO) if item.get(_FIELDS[k])]


def open_media(item: dict):
    kinds = media_kinds(item)
    if not kinds:
        return None
    return {"item": item, "kinds": kinds, "pos": 0}


def next_media(state):
    if not state:
        return state
    return {**state, "pos": (state["pos"] + 1) % len(state["kinds"])}


def prev_media(state):
    if not state:
        return state
    return {**state, "pos": (state["pos"] - 1) % len(state["kinds"])}


def close_media():
    return None


def current_kind(state):
    if not state:
        return None
    return state["kinds"][state["pos"]]


def current_media_url(state):
    kind = current_kind(state)
    if kind is None:
        return None
    return state["item"].get(_FIELDS[kind])


def can_navigate(state) -> bool:
    return bool(state) and len(state["kinds"]) > 1


def media_label(state) -> str:
    if not state:
        return ""
    return f"{_LABELS[current_kind(state)]} • {state['pos'] + 1} of {len(state['kinds'])}"


def download_filename(url, fallback: str = "media") -> str:
    """Trailing path segment of `url`, or `fallback` when there isn't one."""
    if not url:
        return fallback
    path = urlparse(str(url)).path
    name = path.split("/")[-1] if path else ""
    return name or fallback
