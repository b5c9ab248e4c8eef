import datetime
from typing import List, Dict

def timestamp():
    return datetime.datetime.now().strftime("%Y%m%d_%H%M%S")

def _to_float(x) -> float:
    try:
        val = float(x)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if val != val else val  # NaN

def _blank_to_none(x):
    if x is None:
        return None
    s = str(x).strip()
    return s or None

def normalize_item(row: Dict) -> Dict:
    it = dict(row)
    it["inventory_code"] = "" if it.get("inventory_code") is None else str(it["inventory_code"])
    it["available"] = _to_float(it.get("available"))
    it["pricing"] = _to_float(it.get("pricing"))
    it["strain_name"] = _blank_to_none(it.get("strain_name"))
    it["photo_url"] = _blank_to_none(it.get("photo_url"))
    it["video_path"] = _blank_to_none(it.get("video_path"))
    return it

def filter_items(items: List[Dict], term: str) -> List[Dict]:
    """Items whose code contains `term`, ignoring case. Blank term keeps everything."""
    if not term or not term.strip():
        return list(items)
    t = term.lower()
    return [i for i in items if t in str(i.get("inventory_code") or "").lower()]

def compute_totals(items: List[Dict]) -> Dict[str, float]:
    return {
        "available": sum(_to_float(i.get("available")) for i in items),
        "pricing": sum(_to_float(i.get("pricing")) for i in items),
    }

# ---- display formatting ----
def fmt_qty(x) -> str:
    return f"{_to_float(x):.1f}"

def fmt_money(x, with_symbol=True) -> str:
    s = f"{_to_float(x):,.2f}"
    return f"${s}" if with_symbol else s

def hex_to_rgb(h: str):
    try:
        h = h.lstrip("#")
        return tuple(int(h[i:i+2], 16) for i in (0, 2, 4))
    except Exception:
        return (37, 99, 235)

def lighten(rgb, factor=0.85):
    r, g, b = rgb
    return (int(r + (255 - r) * factor), int(g + (255 - g) * factor), int(b + (255 - b) * factor))

def to_latin1(x) -> str:
    if x is None:
        return ""
    if not isinstance(x, str):
        x = str(x)
    return x.encode("latin-1", "replace").decode("latin-1")
