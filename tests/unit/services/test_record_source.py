"""Unit tests for record_source."""
import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from src.models.registration import RegistrationType
from src.services.record_source import (
    DEMO_REGISTRATIONS,
    FixtureRecordSource,
    RemoteRecordSource,
    create_record_source,
    parse_registrations,
)
from src.utils.exceptions import RegistrationFetchError
from src.utils.settings import Settings


@pytest.fixture
def payload():
    """Wire payload mixing both observed backend variants."""
    return [
        {"id": "1", "name": "Alex Rivera", "email": "alex@example.com",
         "registration_type": "Professional", "company": "Tech Corp",
         "created_at": "2024-03-10T10:30:00Z"},
        {"_id": "65f1", "name": "Sarah Chen", "email": "sarah.c@uni.edu",
         "registration_type": "student", "created_at": "2024-03-11T14:20:00.000Z"},
    ]


def mock_response(status_code=200, body=None, json_error=None):
    """Build a fake requests response."""
    resp = MagicMock()
    resp.status_code = status_code
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = body
    return resp


class TestParseRegistrations:
    """Test parse_registrations function."""

    def test_parses_both_variants(self, payload):
        result = parse_registrations(payload)
        assert [r.id for r in result] == ["1", "65f1"]
        assert result[0].registration_type is RegistrationType.PROFESSIONAL
        assert result[1].registration_type is RegistrationType.STUDENT

    def test_empty_list(self):
        assert parse_registrations([]) == []

    def test_non_list_payload_raises_error(self):
        with pytest.raises(RegistrationFetchError, match="Expected a list of registrations, got dict"):
            parse_registrations({"registrations": []})

    def test_malformed_records_skipped_with_warning(self, payload, caplog):
        """Invalid records are dropped and logged, valid ones kept."""
        payload.insert(1, {"id": "bad", "name": "No Date", "email": "x@y.z", "registration_type": "student"})
        payload.append("not an object")

        with caplog.at_level(logging.WARNING, logger="src.services.record_source"):
            result = parse_registrations(payload)

        assert [r.id for r in result] == ["1", "65f1"]
        assert "Skipping registration #1" in caplog.text
        assert "created_at" in caplog.text
        assert "Skipping registration #3" in caplog.text

    def test_placeholder_email_kept(self, payload, caplog):
        """Email is free text, so a placeholder value is not skipped."""
        payload[1]["email"] = "n/a"

        with caplog.at_level(logging.WARNING, logger="src.services.record_source"):
            result = parse_registrations(payload)

        assert [r.id for r in result] == ["1", "65f1"]
        assert result[1].email == "n/a"
        assert "Skipping" not in caplog.text

    def test_unparseable_timestamp_skipped(self, payload):
        payload[0]["created_at"] = "not-a-date"
        result = parse_registrations(payload)
        assert [r.id for r in result] == ["65f1"]

    def test_duplicate_id_keeps_first(self, payload, caplog):
        duplicate = dict(payload[0], name="Alex Again")
        payload.append(duplicate)

        with caplog.at_level(logging.WARNING, logger="src.services.record_source"):
            result = parse_registrations(payload)

        assert len(result) == 2
        assert result[0].name == "Alex Rivera"
        assert "duplicate id 1" in caplog.text


class TestRemoteRecordSource:
    """Test RemoteRecordSource."""

    def test_url_joins_base_and_path(self):
        source = RemoteRecordSource("http://store:5000/", "/api/admin/registrations")
        assert source.url == "http://store:5000/api/admin/registrations"

    @patch("src.services.record_source.requests.get")
    def test_successful_fetch(self, mock_get, payload):
        mock_get.return_value = mock_response(body=payload)

        source = RemoteRecordSource("http://store:5000", timeout=3.0)
        result = source.fetch_all()

        assert [r.id for r in result] == ["1", "65f1"]
        mock_get.assert_called_once_with(
            "http://store:5000/api/registrations",
            headers={"Accept": "application/json"},
            timeout=3.0,
        )

    @patch("src.services.record_source.requests.get")
    def test_empty_collection(self, mock_get):
        mock_get.return_value = mock_response(body=[])
        assert RemoteRecordSource("http://store").fetch_all() == []

    @patch("src.services.record_source.requests.get")
    def test_network_failure_raises_fetch_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(RegistrationFetchError, match="connection refused"):
            RemoteRecordSource("http://store").fetch_all()

    @patch("src.services.record_source.requests.get")
    def test_timeout_raises_fetch_error(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")

        with pytest.raises(RegistrationFetchError):
            RemoteRecordSource("http://store").fetch_all()

    @patch("src.services.record_source.requests.get")
    def test_non_200_raises_fetch_error(self, mock_get):
        mock_get.return_value = mock_response(status_code=500, body={"message": "Failed to fetch registrations"})

        with pytest.raises(RegistrationFetchError, match="HTTP 500"):
            RemoteRecordSource("http://store").fetch_all()

    @patch("src.services.record_source.requests.get")
    def test_invalid_json_raises_fetch_error(self, mock_get):
        mock_get.return_value = mock_response(json_error=ValueError("Expecting value"))

        with pytest.raises(RegistrationFetchError, match="invalid JSON body"):
            RemoteRecordSource("http://store").fetch_all()

    @patch("src.services.record_source.requests.get")
    def test_non_array_body_raises_fetch_error(self, mock_get):
        mock_get.return_value = mock_response(body={"status": "Backend working"})

        with pytest.raises(RegistrationFetchError):
            RemoteRecordSource("http://store").fetch_all()

    @patch("src.services.record_source.requests.get")
    def test_fetch_error_is_connection_error(self, mock_get):
        """Callers may catch the built-in ConnectionError."""
        mock_get.return_value = mock_response(status_code=404)

        with pytest.raises(ConnectionError):
            RemoteRecordSource("http://store").fetch_all()


class TestFixtureRecordSource:
    """Test FixtureRecordSource."""

    def test_demo_data(self):
        result = FixtureRecordSource().fetch_all()
        assert len(result) == len(DEMO_REGISTRATIONS) == 12
        assert sum(1 for r in result if r.is_student()) == 5
        assert sum(1 for r in result if r.is_professional()) == 7

    def test_demo_data_not_shared(self):
        """Each fetch works on a fresh copy of the demo data."""
        FixtureRecordSource().fetch_all()
        assert DEMO_REGISTRATIONS[0]["name"] == "Alex Rivera"

    def test_file_fixture(self, tmp_path, payload):
        fixture_file = tmp_path / "registrations.json"
        fixture_file.write_text(json.dumps(payload), encoding="utf-8")

        result = FixtureRecordSource(str(fixture_file)).fetch_all()
        assert [r.id for r in result] == ["1", "65f1"]

    def test_missing_file_raises_fetch_error(self, tmp_path):
        source = FixtureRecordSource(str(tmp_path / "missing.json"))
        with pytest.raises(RegistrationFetchError, match="File not found"):
            source.fetch_all()

    def test_malformed_file_raises_fetch_error(self, tmp_path):
        fixture_file = tmp_path / "broken.json"
        fixture_file.write_text("[{broken", encoding="utf-8")

        with pytest.raises(RegistrationFetchError, match="Malformed JSON"):
            FixtureRecordSource(str(fixture_file)).fetch_all()

    @patch("src.services.record_source.time.sleep")
    def test_latency_simulation(self, mock_sleep):
        FixtureRecordSource(latency=0.6).fetch_all()
        mock_sleep.assert_called_once_with(0.6)

    @patch("src.services.record_source.time.sleep")
    def test_no_latency_by_default(self, mock_sleep):
        FixtureRecordSource().fetch_all()
        mock_sleep.assert_not_called()


class TestCreateRecordSource:
    """Test create_record_source factory."""

    def test_remote(self):
        settings = Settings(source="remote", api_url="http://store", api_path="/api/admin/registrations",
                            api_timeout=4.0)
        source = create_record_source(settings)
        assert isinstance(source, RemoteRecordSource)
        assert source.url == "http://store/api/admin/registrations"
        assert source.timeout == 4.0

    def test_fixture(self):
        source = create_record_source(Settings(fixture_path="data/registrations.json", fixture_latency=0.2))
        assert isinstance(source, FixtureRecordSource)
        assert source.path == "data/registrations.json"
        assert source.latency == 0.2
