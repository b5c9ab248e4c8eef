import logging

from utils import normalize_item

logger = logging.getLogger(__name__)

DEFAULT_STATE = {
    "items": [],
    "error": None,
    "loaded": False,
    "fetch_seq": 0,
    "search_term": "",
    "show_upload_form": False,
    "media": None,
}


def init_state(state):
    """Seed a session-state mapping (st.session_state or a plain dict)."""
    for k, v in DEFAULT_STATE.items():
        if k not in state:
            state[k] = list(v) if isinstance(v, list) else v
    return state


def begin_fetch(state) -> int:
    state["fetch_seq"] = state.get("fetch_seq", 0) + 1
    state["error"] = None
    return state["fetch_seq"]


def finish_fetch(state, seq: int, items=None, error=None) -> bool:
    """Apply a fetch result unless a newer fetch was issued after it."""
    if seq != state.get("fetch_seq"):
        logger.warning(f"Discarding stale inventory fetch #{seq} (latest #{state.get('fetch_seq')})")
        return False
    if error is not None:
        state["error"] = error
    else:
        state["items"] = items or []
        state["error"] = None
    state["loaded"] = True
    return True


def load_inventory(state, fetch) -> bool:
    """Fetch every record via `fetch()` and store the result on `state`.

    Errors are kept as a display string; the previous item list is left as is.
    """
    seq = begin_fetch(state)
    try:
        items = [normalize_item(r) for r in fetch()]
    except Exception as e:
        logger.error(f"Error fetching inventory: {e}")
        msg = str(e) or "An unknown error occurred"
        return finish_fetch(state, seq, error=msg)
    return finish_fetch(state, seq, items=items)
