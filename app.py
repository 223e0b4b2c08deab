import logging
from contextlib import contextmanager
from typing import List, Optional

import altair as alt
import pandas as pd
import streamlit as st

from core.advisor import GeminiPriorityAdvisor
from core.charts import ranked_bar_chart
from core.data import SheetSync, load_dashboard_data, prepare_context
from core.markup import card_header_html, page_header_html, pending_card_html
from core.metrics_dashboard import compute_dashboard
from core.metrics_database import compute_database
from core.records import RECORD_COLUMNS, records_to_frame
from core.stats import RankedItem

logging.basicConfig(level=logging.INFO)
alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .page-head {padding: 4px 0 8px;border-bottom: 1px solid #e2e8f0;margin-bottom: 12px;}
        .page-head .page-sub {color: #94a3b8;font-size: 0.7rem;font-weight: 700;text-transform: uppercase;letter-spacing: 0.1em;}
        .page-head .page-title {font-size: 1.5rem;font-weight: 900;color: #1e293b;}
        .card-head {display: flex;justify-content: space-between;align-items: center;margin-bottom: 6px;}
        .card-title {font-weight: 900;font-size: 0.9rem;color: #1e293b;}
        .card-badge {font-size: 0.6rem;font-weight: 700;color: #64748b;background: #f1f5f9;padding: 2px 8px;border-radius: 6px;text-transform: uppercase;}
        .pending-card {border-left: 4px solid #fbbf24;border-radius: 12px;padding: 12px 16px;background: #f8fafc;margin-bottom: 10px;}
        .pending-card .room {color: #4f46e5;font-size: 0.7rem;font-weight: 800;text-transform: uppercase;}
        .pending-card .item {font-weight: 800;color: #1e293b;}
        .pending-card .complaint {font-style: italic;color: #64748b;font-size: 0.85rem;}
        .pending-card .date {color: #94a3b8;font-size: 0.7rem;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, badge: Optional[str] = None):
    box = st.container(border=True)
    box.markdown(card_header_html(title, badge), unsafe_allow_html=True)
    with box:
        yield box


def render_page_header(title: str, subtitle: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(page_header_html(title, subtitle), unsafe_allow_html=True)
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )


def render_ranking(items: List[dict], title: str, badge: str, color: str, highlight_color: str):
    with card(title, badge):
        if not items:
            st.info("Belum ada data.")
            return
        ranked = [RankedItem(name=i["name"], count=i["count"]) for i in items]
        st.altair_chart(
            ranked_bar_chart(ranked, color=color, highlight_color=highlight_color),
            use_container_width=True,
        )


def render_obstacles(shares: List[dict]):
    with card("Kendala Dominan (H)"):
        if not shares:
            st.info("Tidak ada hambatan tercatat.")
            return
        for obs in shares:
            # plain text: obstacle names come straight from the sheet
            st.text(f"{obs['name']} · {obs['count']}")
            st.progress(min(1.0, float(obs["share"])))


def render_pending_preview(preview: List[dict], pending_count: int):
    with card("Preview Antrian Baru", f"{pending_count} antrian"):
        if not preview:
            st.success("Tidak ada antrian baru.")
            return
        cols = st.columns(2)
        for i, r in enumerate(preview):
            cols[i % 2].markdown(pending_card_html(r), unsafe_allow_html=True)


def render_priority_check(rows: List[dict]):
    with st.expander("Analisis prioritas (AI)", expanded=False):
        if not rows:
            st.info("Tidak ada baris untuk dianalisis.")
            return
        options = {f"{r['id']} · {r['room_name']} · {r['item_name']}": r for r in rows}
        choice = st.selectbox("Pilih temuan", list(options.keys()))
        if st.button("Analisis"):
            row = options[choice]
            with st.spinner("Menganalisis..."):
                advice = st.session_state["advisor"].advise(row["complaint_type"], row["item_name"], row["room_name"])
            st.metric("Prioritas", advice.priority.value)
            st.caption(advice.reasoning)


# ---------- UI setup ----------
st.set_page_config(page_title="MedFix IPSRS Analytics", layout="wide")
inject_base_styles()

if "sheet_sync" not in st.session_state:
    st.session_state["sheet_sync"] = SheetSync()
if "advisor" not in st.session_state:
    st.session_state["advisor"] = GeminiPriorityAdvisor()
sheet_sync: SheetSync = st.session_state["sheet_sync"]

# ----- Sidebar: navigation + sync -----
with st.sidebar:
    st.markdown("## MedFix **IPSRS**")
    st.caption("Analytics")
    st.markdown("---")
    nav_choice = st.radio("Navigate", ["Dashboard", "Data Sheet"], index=0)
    st.markdown("---")
    if st.button("Update", use_container_width=True):
        with st.spinner("Sinkronisasi..."):
            if not sheet_sync.sync():
                st.error("Sinkronisasi gagal. Menampilkan data terakhir.")
    filter_text = st.text_input("Cari...", "")

data_ctx = load_dashboard_data(sheet_sync)
if data_ctx.get("last_sync"):
    st.sidebar.caption(f"Sinkron terakhir: {data_ctx['last_sync']}")
if data_ctx.get("last_error"):
    st.sidebar.warning("Data mungkin tidak terbaru.")

filters = {"query": filter_text, "tab": "DASHBOARD" if nav_choice == "Dashboard" else "DATABASE"}
ctx = prepare_context(filters, data_ctx)
records = ctx["records"]

if nav_choice == "Dashboard":
    payload = compute_dashboard(ctx["filters"], ctx)
    render_page_header("Visualisasi Kinerja IPSRS", f"{len(records)} Row Terintegrasi")

    kpis = payload["kpis"]
    cols = st.columns(4)
    cols[0].metric("Total Temuan", kpis["total"], help="Log (B)")
    cols[1].metric("Belum Selesai", kpis["pending"], help="F & H kosong")
    cols[2].metric("Ada Hambatan", kpis["with_obstacles"], help="Log (H)")
    cols[3].metric("Done", kpis["completed"], help="Log (F)")

    rankings = payload["rankings"]
    chart_cols = st.columns(3)
    with chart_cols[0]:
        render_ranking(rankings["top_items"], "Top Item Rusak (B)", "Total Data", "#818cf8", "#4f46e5")
    with chart_cols[1]:
        render_ranking(rankings["top_all_complaints"], "Top 10 Masalah (C)", "Seluruh Data", "#a5b4fc", "#6366f1")
    with chart_cols[2]:
        render_ranking(rankings["top_unfinished_complaints"], "Belum Selesai (C)", "F Kosong", "#fbbf24", "#f59e0b")

    left, right = st.columns([1, 2])
    with left:
        render_obstacles(payload["obstacle_shares"])
    with right:
        render_pending_preview(payload["pending_preview"], kpis["pending"])
else:
    payload = compute_database(ctx["filters"], ctx)
    export_df = records_to_frame(ctx["filtered_records"])[RECORD_COLUMNS]
    render_page_header(
        "Log Lengkap Temuan",
        f"{payload['row_count']} dari {payload['total_count']} Row",
        export_df=export_df,
        export_name="temuan_ipsrs.csv",
    )
    table = pd.DataFrame(payload["rows"], columns=["room_name", "item_name", "complaint_type", "complaint_date", "repair_label", "obstacle_label"])
    table = table.rename(
        columns={
            "room_name": "Ruangan",
            "item_name": "Item",
            "complaint_type": "Komplain",
            "complaint_date": "Lapor",
            "repair_label": "Selesai",
            "obstacle_label": "Hambatan",
        }
    )
    st.dataframe(table, use_container_width=True, hide_index=True)
    render_priority_check(payload["rows"])
