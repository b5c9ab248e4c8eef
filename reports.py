import datetime as dt
from typing import List, Dict

import pandas as pd
from fpdf import FPDF

from utils import fmt_money, fmt_qty, lighten, to_latin1

COLUMNS = {
    "inventory_code": "Inventory Code",
    "strain_name": "Strain Name",
    "available": "Available",
    "pricing": "Price",
    "photo_url": "Photo",
    "video_path": "Video",
    "created_at": "Created",
}


def items_to_frame(items: List[Dict]) -> pd.DataFrame:
    df = pd.DataFrame(items)
    for col in COLUMNS:
        if col not in df.columns:
            df[col] = None
    return df[list(COLUMNS)]


def export_csv_bytes(items: List[Dict]) -> bytes:
    return items_to_frame(items).rename(columns=COLUMNS).to_csv(index=False).encode("utf-8")


class BrandedPDF(FPDF):
    def __init__(self, brand_name: str, brand_rgb: tuple, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.brand_name = brand_name
        self.brand_rgb = brand_rgb
        self.set_auto_page_break(auto=True, margin=12)

    def header(self):
        self.set_fill_color(*lighten(self.brand_rgb, 0.75))
        self.rect(x=0, y=0, w=self.w, h=14, style="F")
        self.set_xy(10, 4)
        self.set_font("Helvetica", "B", 11)
        self.set_text_color(*self.brand_rgb)
        self.cell(0, 6, to_latin1(self.brand_name))
        self.set_draw_color(*self.brand_rgb)
        self.set_line_width(0.4)
        self.line(8, 14, self.w - 8, 14)
        self.set_y(18)

    def footer(self):
        self.set_y(-8)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(80, 80, 80)
        self.cell(0, 6, to_latin1(f"Page {self.page_no()}"), align="R")


# code, strain, available, price, photo?, video?
_WIDTHS = [50, 50, 25, 30, 17, 18]
_HEADERS = ["Inventory Code", "Strain Name", "Available", "Price", "Photo", "Video"]
_ALIGN = ["L", "L", "R", "R", "C", "C"]


def _truncate_to_fit(pdf, txt, w: float, margin: float = 2.0) -> str:
    if txt is None:
        return ""
    s = to_latin1(str(txt))
    maxw = max(1.0, w - margin)
    if pdf.get_string_width(s) <= maxw:
        return s
    ell = "..."
    if pdf.get_string_width(ell) > maxw:
        return ""
    while s and pdf.get_string_width(s + ell) > maxw:
        s = s[:-1]
    return (s + ell) if s else ell


def _row(pdf, values, row_h=7, fill=False, bold=False):
    pdf.set_font("Helvetica", "B" if bold else "", 9)
    for w, val, align in zip(_WIDTHS, values, _ALIGN):
        pdf.cell(w, row_h, _truncate_to_fit(pdf, val, w), border=1, align=align, fill=fill, new_x="RIGHT", new_y="TOP")
    pdf.ln(row_h)


def _header_row(pdf, brand_rgb, row_h=7):
    pdf.set_fill_color(*lighten(brand_rgb, 0.85))
    pdf.set_text_color(20, 20, 20)
    _row(pdf, _HEADERS, row_h=row_h, fill=True, bold=True)
    pdf.set_text_color(15, 15, 15)


def _ensure_page_space(pdf, needed_h, brand_rgb):
    if pdf.get_y() + needed_h <= pdf.h - pdf.b_margin:
        return
    pdf.add_page()
    _header_row(pdf, brand_rgb)


def inventory_pdf_bytes(items: List[Dict], totals: Dict, brand_name: str, brand_rgb: tuple, filter_term: str = "", total_count: int | None = None) -> bytes:
    pdf = BrandedPDF(brand_name=brand_name, brand_rgb=brand_rgb, orientation="P", unit="mm", format="A4")
    pdf.add_page()
    pdf.set_text_color(30, 30, 30)
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "Inventory Report", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 6, to_latin1(f"Date Issued: {dt.datetime.now().strftime('%Y-%m-%d %H:%M')}"), new_x="LMARGIN", new_y="NEXT")
    if filter_term.strip():
        pdf.cell(0, 6, to_latin1(f"Filter: code contains '{filter_term}'"), new_x="LMARGIN", new_y="NEXT")
    shown = f"Showing {len(items)} of {total_count} records" if total_count is not None else f"Rows: {len(items)}"
    pdf.cell(0, 6, to_latin1(shown), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)

    _header_row(pdf, brand_rgb)
    for it in items:
        _ensure_page_space(pdf, 7, brand_rgb)
        _row(pdf, [
            it.get("inventory_code") or "",
            it.get("strain_name") or "",
            fmt_qty(it.get("available")),
            fmt_money(it.get("pricing")),
            "yes" if it.get("photo_url") else "-",
            "yes" if it.get("video_path") else "-",
        ])
    _ensure_page_space(pdf, 7, brand_rgb)
    pdf.set_fill_color(*lighten(brand_rgb, 0.85))
    _row(pdf, ["Total", "", f"Sum {fmt_qty(totals['available'])}", f"Sum {fmt_money(totals['pricing'])}", "", ""], fill=True, bold=True)
    return bytes(pdf.output())
