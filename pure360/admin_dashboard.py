import logging
from typing import Any, Dict, List, Optional

import streamlit as st
import pandas as pd
import plotly.express as px

from pure360.db import models
from pure360.db.database import DataAccessError, select_rows, update_rows

logger = logging.getLogger(__name__)

DISPLAY_COLUMNS = {
    models.BOOKINGS: [
        "created_at", "service_type", "bedrooms", "bathrooms",
        "scheduled_date", "scheduled_time", "total_price", "status", "id",
    ],
    models.QUOTE_REQUESTS: [
        "created_at", "service_type", "care_type", "frequency", "pickup_suburb",
        "dropoff_suburb", "item_description", "special_requirements", "status", "admin_notes", "id",
    ],
    models.WORKER_APPLICATIONS: [
        "created_at", "full_name", "contact_number", "area", "work_type",
        "years_experience", "status", "admin_notes", "id",
    ],
    models.PROFILES: [
        "created_at", "first_name", "last_name", "address", "worker_status", "profile_completed", "user_id",
    ],
}


# --- Data access ---

def load_collection(table: str, client=None) -> pd.DataFrame:
    """Whole collection, newest first."""
    return pd.DataFrame(select_rows(table, client=client))


def load_workers(client=None) -> pd.DataFrame:
    roles = select_rows(models.USER_ROLES, {"role": "worker"}, newest_first=False, client=client)
    if not roles:
        return pd.DataFrame()
    worker_ids = [r["user_id"] for r in roles]
    return pd.DataFrame(select_rows(models.PROFILES, {"user_id": worker_ids}, client=client))


def update_status(table: str, record_id: str, status: str, client=None) -> List[Dict[str, Any]]:
    if status not in models.STATUS_OPTIONS[table]:
        raise ValueError(f"Unknown {table} status: {status}")
    return update_rows(table, {"status": status}, "id", record_id, client=client)


def update_notes(table: str, record_id: str, notes: str, client=None) -> List[Dict[str, Any]]:
    return update_rows(table, {"admin_notes": notes.strip() or None}, "id", record_id, client=client)


def set_worker_status(user_id: str, status: str, client=None) -> List[Dict[str, Any]]:
    if status not in models.WORKER_STATUSES:
        raise ValueError(f"Unknown worker status: {status}")
    return update_rows(models.PROFILES, {"worker_status": status}, "user_id", user_id, client=client)


def status_counts(df: pd.DataFrame, column: str = "status") -> pd.DataFrame:
    if df.empty or column not in df.columns:
        return pd.DataFrame(columns=[column, "count"])
    return df[column].value_counts().rename_axis(column).reset_index(name="count")


# --- Rendering ---

def _render_table(title: str, table: str, df: pd.DataFrame, status_column: str = "status") -> Optional[pd.DataFrame]:
    if df.empty:
        st.info(f"No {title.lower()} found in the database.")
        return None

    # --- KPI Metrics ---
    counts = status_counts(df, status_column)
    cols = st.columns(min(len(counts), 4) + 1)
    cols[0].metric(f"Total {title}", len(df))
    for col, (_, row) in zip(cols[1:], counts.head(4).iterrows()):
        col.metric(str(row[status_column]).replace("_", " ").title(), int(row["count"]))

    # --- Filters ---
    options = list(df[status_column].dropna().unique()) if status_column in df.columns else []
    status_filter = st.multiselect("Filter by Status", options=options, default=options, key=f"filter-{table}")
    filtered_df = df[df[status_column].isin(status_filter)] if status_filter else df

    final_cols = [c for c in DISPLAY_COLUMNS[table] if c in filtered_df.columns]
    st.dataframe(filtered_df[final_cols], use_container_width=True)

    if not counts.empty:
        fig = px.bar(counts, x=status_column, y="count", title=f"{title} by status")
        st.plotly_chart(fig, use_container_width=True)

    csv = filtered_df.to_csv(index=False).encode("utf-8")
    st.download_button(
        "📥 Download as CSV",
        csv,
        f"{table}.csv",
        "text/csv",
        key=f"download-{table}",
    )
    return filtered_df


def _row_label(table: str, row: Dict[str, Any]) -> str:
    if table == models.BOOKINGS:
        return f"{row.get('service_type')} · {row.get('scheduled_date')} {row.get('scheduled_time')}"
    if table == models.QUOTE_REQUESTS:
        return f"{row.get('service_type')} · {str(row.get('created_at', ''))[:10]}"
    return f"{row.get('full_name')} · {row.get('work_type')}"


def _render_row_actions(table: str, df: pd.DataFrame, with_notes: bool = False) -> None:
    st.write("### Actions")
    statuses = list(models.STATUS_OPTIONS[table])
    for row in df.to_dict("records"):
        with st.expander(_row_label(table, row)):
            current = row.get("status")
            new_status = st.selectbox(
                "Status",
                statuses,
                index=statuses.index(current) if current in statuses else 0,
                key=f"status-{table}-{row['id']}",
            )
            notes = None
            if with_notes:
                notes = st.text_area(
                    "Admin notes", value=row.get("admin_notes") or "", key=f"notes-{table}-{row['id']}"
                )
            if st.button("Save", key=f"save-{table}-{row['id']}"):
                try:
                    if new_status != current:
                        update_status(table, row["id"], new_status)
                    if with_notes and notes != (row.get("admin_notes") or ""):
                        update_notes(table, row["id"], notes)
                    st.success("Status updated")
                    st.rerun()
                except DataAccessError:
                    st.error("Failed to update status")


def _render_workers(df: pd.DataFrame) -> None:
    if df.empty:
        st.info("No workers registered yet.")
        return
    pending = int((df["worker_status"] == "pending_approval").sum()) if "worker_status" in df.columns else 0
    st.metric("Pending approval", pending)
    final_cols = [c for c in DISPLAY_COLUMNS[models.PROFILES] if c in df.columns]
    st.dataframe(df[final_cols], use_container_width=True)

    for row in df.to_dict("records"):
        name = f"{row.get('first_name', '')} {row.get('last_name', '')}".strip()
        with st.expander(f"{name} · {row.get('worker_status')}"):
            if row.get("profile_picture_url"):
                st.image(row["profile_picture_url"], width=120)
            st.write(row.get("address") or "No address")
            c1, c2 = st.columns(2)
            try:
                if row.get("worker_status") != "approved" and c1.button("Approve", key=f"approve-{row['user_id']}"):
                    set_worker_status(row["user_id"], "approved")
                    st.rerun()
                if row.get("worker_status") != "rejected" and c2.button("Reject", key=f"reject-{row['user_id']}"):
                    set_worker_status(row["user_id"], "rejected")
                    st.rerun()
            except DataAccessError:
                st.error("Failed to update worker status")


def render_admin_dashboard():
    st.title("📊 Pure360 Admin Dashboard")

    # --- Fetch Data ---
    try:
        bookings_df = load_collection(models.BOOKINGS)
        quotes_df = load_collection(models.QUOTE_REQUESTS)
        applications_df = load_collection(models.WORKER_APPLICATIONS)
        workers_df = load_workers()
    except DataAccessError as e:
        st.error(f"Error loading data: {e}")
        return

    tabs = st.tabs([
        f"Bookings ({len(bookings_df)})",
        f"Quotes ({len(quotes_df)})",
        f"Applications ({len(applications_df)})",
        f"Workers ({len(workers_df)})",
    ])

    with tabs[0]:
        filtered = _render_table("Bookings", models.BOOKINGS, bookings_df)
        if filtered is not None:
            _render_row_actions(models.BOOKINGS, filtered)
    with tabs[1]:
        filtered = _render_table("Quotes", models.QUOTE_REQUESTS, quotes_df)
        if filtered is not None:
            _render_row_actions(models.QUOTE_REQUESTS, filtered, with_notes=True)
    with tabs[2]:
        filtered = _render_table("Applications", models.WORKER_APPLICATIONS, applications_df)
        if filtered is not None:
            _render_row_actions(models.WORKER_APPLICATIONS, filtered, with_notes=True)
    with tabs[3]:
        _render_workers(workers_df)
