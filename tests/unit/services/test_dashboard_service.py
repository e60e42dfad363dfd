"""Unit tests for dashboard_service."""
from unittest.mock import MagicMock, patch

import pytest

from src.models.registration import Registration, RegistrationType
from src.models.view_state import ColumnVisibility, SortOrder, TypeFilter, ViewState
from src.services import dashboard_service
from src.services.dashboard_service import (
    COLUMNS_KEY,
    CONNECTION_ERROR_MESSAGE,
    ERROR_KEY,
    LOADING_KEY,
    RECORDS_KEY,
    VIEW_STATE_KEY,
    clear_filters,
    current_view,
    ensure_dashboard_state,
    get_columns,
    get_error,
    get_records,
    get_view_state,
    is_loading,
    load_registrations,
    reload_registrations,
    set_column_visible,
    update_view_state,
)
from src.utils.exceptions import RegistrationFetchError


@pytest.fixture
def session_state():
    """Replace Streamlit session state with a plain dict."""
    with patch("src.services.dashboard_service.st") as mock_st:
        mock_st.session_state = {}
        yield mock_st.session_state


@pytest.fixture
def registrations():
    return [
        Registration(id="1", name="Alex Rivera", email="alex@example.com",
                     registration_type=RegistrationType.PROFESSIONAL, created_at="2024-03-10"),
        Registration(id="2", name="Sarah Chen", email="sarah.c@uni.edu",
                     registration_type=RegistrationType.STUDENT, created_at="2024-03-11"),
    ]


@pytest.fixture
def source(registrations):
    mock_source = MagicMock()
    mock_source.fetch_all.return_value = registrations
    return mock_source


@pytest.fixture
def failing_source():
    mock_source = MagicMock()
    mock_source.fetch_all.side_effect = RegistrationFetchError("Failed to fetch registrations: HTTP 500")
    return mock_source


class TestEnsureDashboardState:
    """Test ensure_dashboard_state function."""

    def test_defaults(self, session_state):
        ensure_dashboard_state()

        assert session_state[RECORDS_KEY] is None
        assert session_state[LOADING_KEY] is True
        assert session_state[ERROR_KEY] is None
        assert session_state[VIEW_STATE_KEY] == ViewState()
        assert session_state[COLUMNS_KEY] == ColumnVisibility()

    def test_existing_values_kept(self, session_state):
        session_state[VIEW_STATE_KEY] = ViewState(search_query="sarah")
        ensure_dashboard_state()
        assert session_state[VIEW_STATE_KEY].search_query == "sarah"


class TestLoadRegistrations:
    """Test load_registrations function."""

    def test_successful_load(self, session_state, source):
        assert load_registrations(source) is True

        assert [r.id for r in get_records()] == ["1", "2"]
        assert isinstance(session_state[RECORDS_KEY], tuple)
        assert is_loading() is False
        assert get_error() is None

    def test_fetch_runs_once_per_session(self, session_state, source):
        load_registrations(source)
        load_registrations(source)
        load_registrations(source)

        source.fetch_all.assert_called_once()

    def test_failure_sets_error(self, session_state, failing_source):
        assert load_registrations(failing_source) is False

        assert get_error() == CONNECTION_ERROR_MESSAGE
        assert is_loading() is False
        assert session_state[RECORDS_KEY] is None

    def test_no_automatic_retry_after_failure(self, session_state, failing_source):
        load_registrations(failing_source)
        load_registrations(failing_source)

        failing_source.fetch_all.assert_called_once()

    def test_unexpected_errors_propagate(self, session_state):
        broken = MagicMock()
        broken.fetch_all.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            load_registrations(broken)
        assert is_loading() is False

    def test_default_source_from_settings(self, session_state, source):
        with patch.object(dashboard_service, "create_record_source", return_value=source) as mock_create, \
                patch.object(dashboard_service, "get_settings") as mock_settings:
            load_registrations()

        mock_create.assert_called_once_with(mock_settings.return_value)
        source.fetch_all.assert_called_once()


class TestReloadRegistrations:
    """Test reload_registrations function."""

    def test_reload_refetches_from_scratch(self, session_state, source):
        load_registrations(source)
        reload_registrations()

        assert is_loading() is True
        assert session_state[RECORDS_KEY] is None

        load_registrations(source)
        assert source.fetch_all.call_count == 2

    def test_reload_clears_error(self, session_state, failing_source, source):
        load_registrations(failing_source)
        reload_registrations()

        assert get_error() is None
        assert load_registrations(source) is True

    def test_reload_keeps_filters(self, session_state, source):
        load_registrations(source)
        update_view_state(search_query="sarah")
        set_column_visible("phone", False)

        reload_registrations()

        assert get_view_state().search_query == "sarah"
        assert get_columns().phone is False


class TestViewStateAccess:
    """Test view state helpers."""

    def test_update_view_state(self, session_state):
        state = update_view_state(type_filter=TypeFilter.STUDENT, sort_order=SortOrder.OLDEST)

        assert state == ViewState(type_filter=TypeFilter.STUDENT, sort_order=SortOrder.OLDEST)
        assert get_view_state() is state

    def test_clear_filters(self, session_state):
        update_view_state(search_query="x", type_filter=TypeFilter.PROFESSIONAL, sort_order=SortOrder.OLDEST)

        state = clear_filters()

        assert state == ViewState(sort_order=SortOrder.OLDEST)

    def test_set_column_visible(self, session_state):
        columns = set_column_visible("company", False)
        assert columns == ColumnVisibility(company=False)
        assert get_columns() == columns


class TestCurrentView:
    """Test current_view function."""

    def test_none_while_loading(self, session_state):
        ensure_dashboard_state()
        assert current_view() is None

    def test_none_after_failure(self, session_state, failing_source):
        load_registrations(failing_source)
        assert current_view() is None

    def test_projects_loaded_records(self, session_state, source):
        load_registrations(source)
        update_view_state(search_query="sarah")
        set_column_visible("date", False)

        view = current_view()

        assert [r.id for r in view.visible_rows] == ["2"]
        assert view.total_count == 2
        assert view.student_count == 1
        assert view.professional_count == 1
        assert view.visible_columns == frozenset({"phone", "company"})

    def test_empty_collection(self, session_state):
        empty = MagicMock()
        empty.fetch_all.return_value = []
        load_registrations(empty)

        view = current_view()

        assert view.total_count == 0
        assert view.visible_rows == ()
