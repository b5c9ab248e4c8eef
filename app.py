# app.py — Inventory Dashboard (Streamlit)
# - Inventory table backed by Supabase (table + photo/video storage buckets)
# - Code search with live Sum rows, photo/video viewer with download
# - Add-item form: uploads media first, then inserts the record
# - CSV / PDF export of the rows currently shown

import logging
import streamlit as st

import db
import carousel
from config import CONFIG
from forms import FORM_DEFAULTS, submit_item
from reports import items_to_frame, export_csv_bytes, inventory_pdf_bytes
from utils import filter_items, compute_totals, fmt_qty, fmt_money, hex_to_rgb, timestamp
from view_state import init_state, load_inventory

logging.basicConfig(
    level=getattr(logging, str(CONFIG.get("log_level", "INFO")).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("inventory_app")

st.set_page_config(page_title=CONFIG["brand_name"], page_icon="📦", layout="wide")

brand_name = CONFIG["brand_name"]
brand_color = CONFIG["brand_color"]
brand_rgb = hex_to_rgb(brand_color)

state = init_state(st.session_state)
if "form_nonce" not in st.session_state:
    st.session_state.form_nonce = 0

def _fetch_rows():
    return db.fetch_items(db.get_client(), CONFIG["table_name"])

def refresh():
    load_inventory(state, _fetch_rows)

def open_upload_form():
    st.session_state.show_upload_form = True

# ---------- Sidebar brand header ----------
def render_brand_header():
    st.sidebar.markdown(
        f"<h2 style='color:{brand_color}; margin: 0 0 6px 0'>{brand_name}</h2>",
        unsafe_allow_html=True
    )
    st.sidebar.caption(f"Table: `{CONFIG['table_name']}`")
    st.sidebar.caption(f"Buckets: `{CONFIG['photo_bucket']}`, `{CONFIG['video_bucket']}`")

render_brand_header()

# ---------- Upload form ----------
def view_upload_form():
    nonce = st.session_state.form_nonce
    st.subheader("Add New Inventory Item")
    if st.session_state.get("form_error"):
        st.error(st.session_state.form_error)

    with st.form(f"upload_form_{nonce}"):
        cols = st.columns(2)
        code = cols[0].text_input("Inventory Code *", value=FORM_DEFAULTS["inventory_code"], placeholder="Enter unique code", key=f"f_code_{nonce}")
        strain = cols[1].text_input("Strain Name", value=FORM_DEFAULTS["strain_name"], placeholder="Enter strain name", key=f"f_strain_{nonce}")

        cols2 = st.columns(2)
        available = cols2[0].number_input("Available Quantity", value=FORM_DEFAULTS["available"], step=1.0, format="%.1f", key=f"f_avail_{nonce}")
        pricing = cols2[1].number_input("Price ($)", value=FORM_DEFAULTS["pricing"], step=0.01, format="%.2f", key=f"f_price_{nonce}")

        cols3 = st.columns(2)
        video = cols3[0].file_uploader("Video (Optional)", type=["mp4", "mov", "webm", "mkv", "avi"], key=f"f_video_{nonce}")
        photo = cols3[1].file_uploader("Image (Optional)", type=["png", "jpg", "jpeg", "gif", "webp"], key=f"f_photo_{nonce}")

        b1, b2 = st.columns([1, 5])
        cancelled = b1.form_submit_button("Cancel")
        submitted = b2.form_submit_button("Save Item", type="primary")

    if cancelled:
        st.session_state.form_error = None
        st.session_state.show_upload_form = False
        st.rerun()

    if submitted:
        try:
            client = db.get_client()
        except db.StorageError as e:
            client = None
            st.session_state.form_error = str(e)
        if client is not None:
            with st.spinner("Uploading..."):
                ok, msg = submit_item(client, {
                    "inventory_code": code,
                    "strain_name": strain,
                    "available": available,
                    "pricing": pricing,
                    "video": video,
                    "photo": photo,
                })
            if ok:
                st.session_state.form_error = None
                st.session_state.form_nonce += 1
                st.session_state.show_upload_form = False
                st.toast(msg, icon="✅")
                refresh()
            else:
                st.session_state.form_error = msg
        st.rerun()

# ---------- Media viewer ----------
def view_media_panel():
    media = state["media"]
    if not media:
        return
    item = media["item"]
    with st.container(border=True):
        top = st.columns([6, 1])
        top[0].markdown(f"**{item.get('inventory_code')}**")
        if top[1].button("✖ Close", key="media_close"):
            state["media"] = carousel.close_media()
            st.session_state.pop("media_download", None)
            st.rerun()

        url = carousel.current_media_url(media)
        if carousel.current_kind(media) == carousel.PHOTO:
            st.image(url, caption="Item photo", width="stretch")
        else:
            st.video(url)

        nav = st.columns([1, 4, 1])
        if carousel.can_navigate(media):
            if nav[0].button("◀ Prev", key="media_prev"):
                state["media"] = carousel.prev_media(media)
                st.session_state.pop("media_download", None)
                st.rerun()
            if nav[2].button("Next ▶", key="media_next"):
                state["media"] = carousel.next_media(media)
                st.session_state.pop("media_download", None)
                st.rerun()
        nav[1].caption(carousel.media_label(media))

        prepared = st.session_state.get("media_download")
        if prepared and prepared[0] == url:
            st.download_button("⬇ Save file", data=prepared[2], file_name=prepared[1], key="media_save")
        elif st.button("⬇ Download", key="media_download_btn"):
            try:
                data = db.fetch_media_bytes(url)
                st.session_state.media_download = (url, carousel.download_filename(url), data)
                st.rerun()
            except db.StorageError as e:
                logger.error(f"Media download failed for {url}: {e}")
                st.error(str(e))

# ---------- Inventory view ----------
def view_inventory():
    st.title("📦 Inventory Management")

    if not state["loaded"]:
        with st.spinner("Loading inventory…"):
            refresh()

    c1, c2, c3 = st.columns([4, 1, 1])
    c1.text_input("Search", placeholder="Search inventory codes...", key="search_term", label_visibility="collapsed")
    if c2.button("🔄 Refresh", width="stretch"):
        refresh()
        st.rerun()
    if c3.button("➕ Add Item", width="stretch"):
        open_upload_form()
        st.rerun()

    if state["error"]:
        st.error(f"Error loading inventory: {state['error']}")
        if st.button("Try Again"):
            refresh()
            st.rerun()
        return

    items = state["items"]
    shown = filter_items(items, st.session_state.search_term)
    totals = compute_totals(shown)

    if not shown:
        st.info("No inventory items found.")
        if st.button("➕ Add Your First Item"):
            open_upload_form()
            st.rerun()
        return

    view_media_panel()

    df = items_to_frame(shown)
    st.dataframe(
        df[["inventory_code", "available", "pricing", "photo_url", "video_path"]],
        width="stretch",
        hide_index=True,
        column_config={
            "inventory_code": st.column_config.TextColumn("Inventory Code"),
            "available": st.column_config.NumberColumn("Available", format="%.1f"),
            "pricing": st.column_config.NumberColumn("Price", format="$%.2f"),
            "photo_url": st.column_config.ImageColumn("Photo"),
            "video_path": st.column_config.LinkColumn("Video", display_text="Play"),
        },
    )

    f1, f2, f3 = st.columns(3)
    f1.markdown(f"**Showing {len(shown)} of {len(items)} records**")
    f2.markdown(f"**Sum {fmt_qty(totals['available'])}**")
    f3.markdown(f"**Sum {fmt_money(totals['pricing'])}**")

    with_media = [i for i in shown if carousel.media_kinds(i)]
    if with_media:
        m1, m2 = st.columns([4, 1])
        idx = m1.selectbox(
            "Photo & Video",
            options=range(len(with_media)),
            format_func=lambda k: with_media[k]["inventory_code"],
        )
        if m2.button("▶ View media", width="stretch"):
            state["media"] = carousel.open_media(with_media[idx])
            st.session_state.pop("media_download", None)
            st.rerun()

    st.divider()
    e1, e2 = st.columns(2)
    e1.download_button(
        "Download CSV",
        data=export_csv_bytes(shown),
        file_name=f"inventory_{timestamp()}.csv",
        mime="text/csv",
    )
    e2.download_button(
        "Download PDF",
        data=inventory_pdf_bytes(shown, totals, brand_name, brand_rgb,
                                 filter_term=st.session_state.search_term, total_count=len(items)),
        file_name=f"inventory_{timestamp()}.pdf",
        mime="application/pdf",
    )

# ---------- Page shell ----------
header = st.columns([6, 1])
header[0].markdown("### Inventory Dashboard")
if header[1].button("Hide Form" if state["show_upload_form"] else "Add New Item", width="stretch"):
    if state["show_upload_form"]:
        st.session_state.form_error = None
    st.session_state.show_upload_form = not state["show_upload_form"]
    st.rerun()

if state["show_upload_form"]:
    with st.container(border=True):
        view_upload_form()

view_inventory()
