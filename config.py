import os, json
from dotenv import load_dotenv

load_dotenv()

ROOT = os.path.dirname(__file__)
CONFIG_PATH = os.path.join(ROOT, "config.json")

DEFAULTS = {
    "brand_name": "Inventory Dashboard",
    "brand_color": "#2563eb",
    "table_name": "inventory",
    "photo_bucket": "inventory-photo",
    "video_bucket": "inventory-videos",
    "cleanup_orphans": False,
    "log_level": "INFO",
}

def load_config(path: str = CONFIG_PATH) -> dict:
    cfg = dict(DEFAULTS)
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            cfg.update(json.load(f))
    cfg["cleanup_orphans"] = str(cfg.get("cleanup_orphans")).lower() in {"1", "true", "yes", "on"}
    return cfg

def get_credentials(secrets=None) -> tuple[str, str]:
    """Supabase URL/key from Streamlit secrets, falling back to the environment."""
    url = key = ""
    if secrets is not None:
        try:
            url = secrets.get("SUPABASE_URL", "") or ""
            key = secrets.get("SUPABASE_KEY", "") or ""
        except Exception:
            # st.secrets raises when no secrets.toml exists
            url = key = ""
    return (url or os.getenv("SUPABASE_URL", ""), key or os.getenv("SUPABASE_KEY", ""))

CONFIG = load_config()
