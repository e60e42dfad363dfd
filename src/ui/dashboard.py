"""Dashboard UI component for browsing registrations."""
from typing import Dict, List, Optional, Sequence

import streamlit as st

from src.models.registration import Registration
from src.models.view_state import (
    OPTIONAL_COLUMNS,
    ColumnVisibility,
    DashboardStats,
    DerivedView,
    SortOrder,
    TypeFilter,
)
from src.services.dashboard_service import (
    clear_filters,
    current_view,
    ensure_dashboard_state,
    get_columns,
    get_error,
    get_view_state,
    is_loading,
    load_registrations,
    reload_registrations,
    set_column_visible,
    update_view_state,
)
from src.services.view_projector import row_cells
from src.ui.html_utils import html_block, html_text

TYPE_FILTER_LABELS = {
    TypeFilter.ALL: "全部",
    TypeFilter.STUDENT: "學生",
    TypeFilter.PROFESSIONAL: "專業人士",
}

SORT_ORDER_LABELS = {
    SortOrder.NEWEST: "最新優先",
    SortOrder.OLDEST: "最早優先",
}

COLUMN_LABELS = {
    "name": "姓名",
    "email": "Email",
    "type": "類別",
    "company": "公司",
    "phone": "電話",
    "date": "報名日期",
}

OPTIONAL_COLUMN_OPTIONS = {
    "phone": "聯絡電話",
    "company": "公司",
    "date": "報名日期",
}

STAT_CARD_STYLES = {
    "total": {"label": "總報名數", "accent": "linear-gradient(135deg, #10b981 0%, #059669 100%)"},
    "students": {"label": "學生", "accent": "linear-gradient(135deg, #f59e0b 0%, #d97706 100%)"},
    "professionals": {"label": "專業人士", "accent": "linear-gradient(135deg, #667eea 0%, #764ba2 100%)"},
}

POPOVER = getattr(st, "popover", None)

SEARCH_KEY = "dashboard_search_input"
TYPE_FILTER_KEY = "dashboard_type_filter"
SORT_ORDER_KEY = "dashboard_sort_order"
TABLE_KEY = "dashboard_table"
COPY_TARGET_KEY = "dashboard_copy_target"


def _column_key(column: str) -> str:
    """Build widget key for a column visibility checkbox."""
    return f"dashboard_column_{column}"


def _stat_card_html(label: str, value: Optional[int], accent: str) -> str:
    """產生統計卡片的 HTML，value 為 None 時顯示載入骨架。"""
    if value is None:
        value_html = '<div class="stat-card__skeleton"></div>'
    else:
        value_html = f'<div class="stat-card__value">{value:,}</div>'

    return html_block(
        f"""
        <div class="stat-card">
            <div class="stat-card__accent" style="background: {accent};"></div>
            <div class="stat-card__body">
                <span class="stat-card__label">{html_text(label)}</span>
                {value_html}
            </div>
        </div>
        """
    )


def _table_rows(view: DerivedView, columns: ColumnVisibility) -> List[Dict[str, str]]:
    """Build labelled table rows containing only the visible columns."""
    return [
        {COLUMN_LABELS[key]: value for key, value in row_cells(record, columns).items()}
        for record in view.visible_rows
    ]


def _copy_values(record: Registration, columns: ColumnVisibility) -> Dict[str, str]:
    """
    Contact values offered for copying from a selected row.

    Email is always offered. Phone only when its column is visible and the
    registration has one.
    """
    values = {"email": record.email}
    if columns.phone and record.phone:
        values["phone"] = record.phone
    return values


def _selected_record(view: DerivedView, selected_rows: Sequence[int]) -> Optional[Registration]:
    """Map a single-row table selection back to its registration."""
    if not selected_rows:
        return None
    index = selected_rows[0]
    # selection can lag behind a filter change by one run
    if 0 <= index < len(view.visible_rows):
        return view.visible_rows[index]
    return None


def _inject_dashboard_styles():
    """注入儀表板專用 CSS。"""
    st.markdown(
        html_block(
            """
            <style>
            .dashboard-heading {
                text-align: center;
                margin-bottom: 14px;
            }
            .dashboard-heading__title {
                font-size: 28px;
                font-weight: 800;
                background: linear-gradient(135deg, #10b981 0%, #667eea 100%);
                -webkit-background-clip: text;
                -webkit-text-fill-color: transparent;
                background-clip: text;
                margin: 0;
            }
            .dashboard-heading__desc {
                margin-top: 4px;
                color: #cbd5f5;
                letter-spacing: 0.05em;
                font-size: 13px;
            }
            .stat-card {
                display: flex;
                align-items: center;
                gap: 18px;
                padding: 20px 24px;
                border-radius: 18px;
                background: rgba(22, 33, 62, 0.85);
                border: 1px solid rgba(148, 163, 184, 0.18);
            }
            .stat-card__accent {
                width: 12px;
                height: 48px;
                border-radius: 999px;
            }
            .stat-card__label {
                color: rgba(148, 163, 184, 0.9);
                font-size: 13px;
                font-weight: 600;
                letter-spacing: 0.08em;
            }
            .stat-card__value {
                font-size: 30px;
                font-weight: 800;
                color: #f8fafc;
            }
            .stat-card__skeleton {
                width: 80px;
                height: 32px;
                margin-top: 4px;
                border-radius: 8px;
                background: rgba(148, 163, 184, 0.2);
            }
            .dashboard-footer {
                display: flex;
                justify-content: space-between;
                margin-top: 12px;
                color: #94a3b8;
                font-size: 13px;
                font-weight: 600;
            }
            </style>
            """
        ),
        unsafe_allow_html=True,
    )


def _render_stats(stats: Optional[DashboardStats]) -> None:
    """Render the three count cards (skeleton when stats is None)."""
    values = {
        "total": stats.total if stats else None,
        "students": stats.students if stats else None,
        "professionals": stats.professionals if stats else None,
    }
    cols = st.columns(3, gap="medium")
    for col, (key, style) in zip(cols, STAT_CARD_STYLES.items()):
        with col:
            st.markdown(
                _stat_card_html(style["label"], values[key], style["accent"]),
                unsafe_allow_html=True,
            )


def _ensure_widget_state() -> None:
    """Seed widget keys from the stored view state and column choices."""
    state = get_view_state()
    columns = get_columns()

    if SEARCH_KEY not in st.session_state:
        st.session_state[SEARCH_KEY] = state.search_query
    if TYPE_FILTER_KEY not in st.session_state:
        st.session_state[TYPE_FILTER_KEY] = state.type_filter
    if SORT_ORDER_KEY not in st.session_state:
        st.session_state[SORT_ORDER_KEY] = state.sort_order
    for column in OPTIONAL_COLUMNS:
        if _column_key(column) not in st.session_state:
            st.session_state[_column_key(column)] = getattr(columns, column)


def _on_clear_filters() -> None:
    """Reset search and type filter widgets along with the view state."""
    clear_filters()
    st.session_state[SEARCH_KEY] = ""
    st.session_state[TYPE_FILTER_KEY] = TypeFilter.ALL


def _render_column_options() -> None:
    for column, label in OPTIONAL_COLUMN_OPTIONS.items():
        visible = st.checkbox(label, key=_column_key(column))
        set_column_visible(column, visible)


def _render_controls() -> None:
    """Render search, type filter, sort and column controls."""
    _ensure_widget_state()

    search_col, type_col, sort_col, view_col = st.columns([2.2, 1.8, 1, 1], gap="small")

    with search_col:
        search_query = st.text_input(
            "搜尋",
            key=SEARCH_KEY,
            placeholder="依姓名或 Email 搜尋",
            label_visibility="collapsed",
        )

    with type_col:
        type_filter = st.radio(
            "報名類別",
            list(TypeFilter),
            key=TYPE_FILTER_KEY,
            horizontal=True,
            format_func=TYPE_FILTER_LABELS.get,
            label_visibility="collapsed",
        )

    with sort_col:
        sort_order = st.selectbox(
            "排序",
            list(SortOrder),
            key=SORT_ORDER_KEY,
            format_func=SORT_ORDER_LABELS.get,
            label_visibility="collapsed",
        )

    with view_col:
        if POPOVER:
            with POPOVER("👁 顯示欄位", use_container_width=True):
                _render_column_options()
        else:
            with st.expander("👁 顯示欄位"):
                _render_column_options()

    update_view_state(search_query=search_query, type_filter=type_filter, sort_order=sort_order)


def _render_empty_state() -> None:
    st.warning("找不到符合條件的報名者，請調整搜尋條件或切換報名類別。")
    st.button("清除篩選條件", key="dashboard_clear_filters", on_click=_on_clear_filters)


def _render_error_state(message: str) -> None:
    """Render blocking error with manual re-sync."""
    st.error(f"❌ {message}")
    st.caption("同步報名資料時發生連線錯誤。")
    st.button(
        "🔄 重新同步報名資料",
        key="dashboard_resync",
        type="primary",
        on_click=reload_registrations,
    )


def _render_copy_panel(record: Registration, columns: ColumnVisibility) -> None:
    """Show copyable contact values for the selected registration."""
    if st.session_state.get(COPY_TARGET_KEY) != record.id:
        st.session_state[COPY_TARGET_KEY] = record.id
        st.toast(f"已選取 {record.name}，可複製聯絡資訊", icon="📋")

    values = _copy_values(record, columns)
    cols = st.columns(len(values), gap="small")
    for col, (column, value) in zip(cols, values.items()):
        with col:
            st.caption(f"複製{COLUMN_LABELS[column]}")
            st.code(value, language=None)


def _render_table(view: DerivedView, columns: ColumnVisibility) -> None:
    if not view.visible_rows:
        _render_empty_state()
        return

    event = st.dataframe(
        _table_rows(view, columns),
        key=TABLE_KEY,
        on_select="rerun",
        selection_mode="single-row",
        use_container_width=True,
        hide_index=True,
    )

    record = _selected_record(view, event.selection.rows)
    if record is None:
        st.session_state[COPY_TARGET_KEY] = None
        st.caption("點選表格中的一列即可複製 Email 或電話。")
        return

    _render_copy_panel(record, columns)


def render_dashboard():
    """渲染報名資料儀表板。"""
    ensure_dashboard_state()
    _inject_dashboard_styles()

    st.markdown(html_block("""
        <div class="dashboard-heading">
            <h2 class="dashboard-heading__title">報名資料總覽</h2>
            <div class="dashboard-heading__desc">唯讀檢視所有活動報名紀錄</div>
        </div>
    """), unsafe_allow_html=True)

    stats_container = st.container()

    if is_loading():
        with stats_container:
            _render_stats(None)
        with st.spinner("正在載入報名資料..."):
            load_registrations()
        st.rerun()

    error = get_error()
    if error:
        _render_error_state(error)
        return

    _render_controls()

    view = current_view()
    if view is None:
        st.button("🔄 重新同步報名資料", key="dashboard_resync_empty", on_click=reload_registrations)
        return

    with stats_container:
        _render_stats(view.stats)

    _render_table(view, get_columns())

    st.markdown(
        html_block(f"""
            <div class="dashboard-footer">
                <span>顯示筆數：{view.shown_count} / {view.total_count}</span>
                <span>資料於頁面載入時同步</span>
            </div>
        """),
        unsafe_allow_html=True,
    )
