"""Registration record sources (remote store or local fixture)."""
import json
import logging
import time
from typing import Any, Dict, List, Optional

import requests

from src.models.registration import Registration
from src.services.storage_service import load_json
from src.utils.exceptions import RegistrationFetchError
from src.utils.settings import SOURCE_REMOTE, Settings

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch registrations"

# Demo collection shown when no store or fixture file is configured
DEMO_REGISTRATIONS: List[Dict[str, Any]] = [
    {"id": "1", "name": "Alex Rivera", "email": "alex@example.com", "registration_type": "professional",
     "company": "Tech Corp", "phone": "+1 (555) 123-4567", "created_at": "2024-03-10T10:30:00Z"},
    {"id": "2", "name": "Sarah Chen", "email": "sarah.c@uni.edu", "registration_type": "student",
     "phone": "+1 (555) 987-6543", "created_at": "2024-03-11T14:20:00Z"},
    {"id": "3", "name": "Marcus Johnson", "email": "marcus.j@innovate.io", "registration_type": "professional",
     "company": "Innovate AI", "created_at": "2024-03-12T09:15:00Z"},
    {"id": "4", "name": "Elena Rodriguez", "email": "elena.r@stanford.edu", "registration_type": "student",
     "created_at": "2024-03-08T16:45:00Z"},
    {"id": "5", "name": "David Kim", "email": "d.kim@globalsoft.com", "registration_type": "professional",
     "company": "GlobalSoft", "phone": "+1 (555) 234-5678", "created_at": "2024-03-13T11:00:00Z"},
    {"id": "6", "name": "Jamie Vardy", "email": "jvardy@college.ac.uk", "registration_type": "student",
     "created_at": "2024-03-14T08:30:00Z"},
    {"id": "7", "name": "Samantha Wu", "email": "swu@design.studio", "registration_type": "professional",
     "company": "Creative Edge", "phone": "+1 (555) 345-6789", "created_at": "2024-03-05T13:10:00Z"},
    {"id": "8", "name": "Robert Brown", "email": "rbrown@stateu.edu", "registration_type": "student",
     "created_at": "2024-03-09T15:20:00Z"},
    {"id": "9", "name": "Lisa Taylor", "email": "lisa.t@fintech.com", "registration_type": "professional",
     "company": "FinTech Solutions", "phone": "+1 (555) 456-7890", "created_at": "2024-03-15T12:05:00Z"},
    {"id": "10", "name": "Kevin Lee", "email": "klee@techy.com", "registration_type": "professional",
     "company": "Techy Inc", "phone": "+1 (555) 567-8901", "created_at": "2024-03-16T17:40:00Z"},
    {"id": "11", "name": "Sophie Martin", "email": "smartin@polytech.fr", "registration_type": "student",
     "created_at": "2024-03-17T10:00:00Z"},
    {"id": "12", "name": "Niko Bellic", "email": "niko@liberty.com", "registration_type": "professional",
     "company": "LCPD", "phone": "+1 (555) 678-9012", "created_at": "2024-03-18T09:00:00Z"},
]


def parse_registrations(payload: Any) -> List[Registration]:
    """
    Convert a raw payload into registrations, skipping malformed records.

    Args:
        payload: Decoded JSON body, expected to be a list of objects

    Returns:
        List of valid registrations in payload order

    Raises:
        RegistrationFetchError: If payload is not a list
    """
    if not isinstance(payload, list):
        raise RegistrationFetchError(
            f"Expected a list of registrations, got {type(payload).__name__}"
        )

    registrations = []
    seen_ids = set()

    for index, item in enumerate(payload):
        try:
            registration = Registration.from_dict(item)
        except ValueError as e:
            logger.warning(f"Skipping registration #{index}: {e}")
            continue

        if registration.id in seen_ids:
            logger.warning(f"Skipping registration #{index}: duplicate id {registration.id}")
            continue

        seen_ids.add(registration.id)
        registrations.append(registration)

    return registrations


class RecordSource:
    """Provides the complete registration collection in one call."""

    def fetch_all(self) -> List[Registration]:
        """
        Fetch every registration.

        Raises:
            RegistrationFetchError: On transport or parse failure
        """
        raise NotImplementedError


class RemoteRecordSource(RecordSource):
    """Reads registrations from the store's HTTP listing endpoint.

    Contract:
    - GET {base_url}{path} returns 200 with a JSON array of registrations
    - anything else is treated as a connection failure
    """

    def __init__(self, base_url: str, path: str = "/api/registrations", timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.path = path
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    def fetch_all(self) -> List[Registration]:
        logger.info(f"Fetching registrations from {self.url}")

        try:
            resp = requests.get(self.url, headers={"Accept": "application/json"}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Registration request failed: {e}")
            raise RegistrationFetchError(f"{FETCH_ERROR_MESSAGE}: {e}") from e

        if resp.status_code != 200:
            logger.error(f"Registration store responded with HTTP {resp.status_code}")
            raise RegistrationFetchError(f"{FETCH_ERROR_MESSAGE}: HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as e:
            logger.error(f"Registration store returned invalid JSON: {e}")
            raise RegistrationFetchError(f"{FETCH_ERROR_MESSAGE}: invalid JSON body") from e

        registrations = parse_registrations(payload)
        logger.info(f"Loaded {len(registrations)} registrations ({len(payload)} received)")
        return registrations


class FixtureRecordSource(RecordSource):
    """Serves registrations from a JSON file or the built-in demo data."""

    def __init__(self, path: Optional[str] = None, latency: float = 0.0) -> None:
        self.path = path
        self.latency = latency

    def _load_payload(self) -> Any:
        if self.path is None:
            return [dict(item) for item in DEMO_REGISTRATIONS]

        try:
            return load_json(self.path)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read registration fixture {self.path}: {e}")
            raise RegistrationFetchError(f"{FETCH_ERROR_MESSAGE}: {e}") from e

    def fetch_all(self) -> List[Registration]:
        if self.latency:
            # Network latency simulation
            time.sleep(self.latency)

        payload = self._load_payload()
        registrations = parse_registrations(payload)
        logger.info(f"Loaded {len(registrations)} registrations from {self.path or 'demo fixture'}")
        return registrations


def create_record_source(settings: Settings) -> RecordSource:
    """Build the record source selected by settings."""
    if settings.source == SOURCE_REMOTE:
        return RemoteRecordSource(settings.api_url, settings.api_path, settings.api_timeout)
    return FixtureRecordSource(settings.fixture_path, settings.fixture_latency)
