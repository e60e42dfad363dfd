"""Dashboard session state: loaded records, loading/error flags and view inputs."""
import logging
from typing import Optional, Tuple

import streamlit as st

from src.models.registration import Registration
from src.models.view_state import ColumnVisibility, DerivedView, ViewState
from src.services.record_source import RecordSource, create_record_source
from src.services.view_projector import project_view
from src.utils.exceptions import RegistrationFetchError
from src.utils.settings import get_settings

logger = logging.getLogger(__name__)

RECORDS_KEY = "registrations_records"
LOADING_KEY = "registrations_loading"
ERROR_KEY = "registrations_error"
VIEW_STATE_KEY = "registrations_view_state"
COLUMNS_KEY = "registrations_columns"

CONNECTION_ERROR_MESSAGE = "與報名資料庫的連線中斷，請重新同步。"


def ensure_dashboard_state() -> None:
    """Ensure dashboard state keys exist."""
    if RECORDS_KEY not in st.session_state:
        st.session_state[RECORDS_KEY] = None
    if LOADING_KEY not in st.session_state:
        st.session_state[LOADING_KEY] = True
    if ERROR_KEY not in st.session_state:
        st.session_state[ERROR_KEY] = None
    if VIEW_STATE_KEY not in st.session_state:
        st.session_state[VIEW_STATE_KEY] = ViewState()
    if COLUMNS_KEY not in st.session_state:
        st.session_state[COLUMNS_KEY] = ColumnVisibility()


def is_loading() -> bool:
    return st.session_state.get(LOADING_KEY, True)


def get_error() -> Optional[str]:
    return st.session_state.get(ERROR_KEY)


def get_records() -> Tuple[Registration, ...]:
    return st.session_state.get(RECORDS_KEY) or ()


def load_registrations(source: Optional[RecordSource] = None) -> bool:
    """
    Fetch the registration collection once per session.

    Args:
        source: Record source to use (default: built from settings)

    Returns:
        True if records are available, False if the fetch failed

    Behavior:
        - No-op when records are already loaded or an error is pending
        - On failure stores a user-facing error; no automatic retry
        - Clears the loading flag in both cases
    """
    ensure_dashboard_state()

    if st.session_state[RECORDS_KEY] is not None:
        return True
    if st.session_state[ERROR_KEY] is not None:
        return False

    if source is None:
        source = create_record_source(get_settings())

    st.session_state[LOADING_KEY] = True
    try:
        records = source.fetch_all()
    except RegistrationFetchError as e:
        logger.error(f"Registration sync failed: {e}")
        st.session_state[ERROR_KEY] = CONNECTION_ERROR_MESSAGE
        return False
    else:
        st.session_state[RECORDS_KEY] = tuple(records)
        st.session_state[ERROR_KEY] = None
        return True
    finally:
        st.session_state[LOADING_KEY] = False


def reload_registrations() -> None:
    """
    Discard loaded data so the next load is a fresh fetch.

    Behavior:
        - Clears records and any error
        - Sets loading flag; filters and column choices are kept
    """
    ensure_dashboard_state()
    st.session_state[RECORDS_KEY] = None
    st.session_state[ERROR_KEY] = None
    st.session_state[LOADING_KEY] = True
    logger.info("Registration re-sync requested")


def get_view_state() -> ViewState:
    ensure_dashboard_state()
    return st.session_state[VIEW_STATE_KEY]


def update_view_state(**changes) -> ViewState:
    """Replace the view state with a copy carrying the given changes."""
    state = get_view_state().replace(**changes)
    st.session_state[VIEW_STATE_KEY] = state
    return state


def clear_filters() -> ViewState:
    state = get_view_state().cleared()
    st.session_state[VIEW_STATE_KEY] = state
    return state


def get_columns() -> ColumnVisibility:
    ensure_dashboard_state()
    return st.session_state[COLUMNS_KEY]


def set_column_visible(column: str, visible: bool) -> ColumnVisibility:
    columns = get_columns().with_column(column, visible)
    st.session_state[COLUMNS_KEY] = columns
    return columns


def current_view() -> Optional[DerivedView]:
    """
    Project the loaded records with the current inputs.

    Returns:
        DerivedView, or None while loading or after a failed fetch
    """
    ensure_dashboard_state()
    if st.session_state[LOADING_KEY] or st.session_state[ERROR_KEY] is not None:
        return None

    records = st.session_state[RECORDS_KEY]
    if records is None:
        return None

    return project_view(records, st.session_state[VIEW_STATE_KEY], st.session_state[COLUMNS_KEY])
