"""Loading amenity records from the amenities API or from disk."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import requests

from ..config import Config
from ..errors import DataSourceError
from ..models.amenity import AmenityRecord

logger = logging.getLogger(__name__)

SAMPLE_AMENITIES: List[Dict[str, Any]] = [
    {"id": 1, "en": "Free WiFi", "category": "internet", "priority": "high"},
    {"id": 2, "en": "Air Conditioning", "category": "comfort", "priority": "high"},
    {"id": 3, "en": "Flat-screen TV", "category": "entertainment", "priority": "medium"},
    {"id": 4, "en": "Mini Refrigerator", "category": "convenience", "priority": "medium"},
    {"id": 5, "en": "Coffee Maker", "category": "convenience", "priority": "low"},
    {"id": 6, "en": "Hair Dryer", "category": "bathroom", "priority": "medium"},
    {"id": 7, "en": "Iron and Ironing Board", "category": "convenience", "priority": "low"},
    {"id": 8, "en": "Safe", "category": "security", "priority": "medium"},
    {"id": 9, "en": "Balcony", "category": "view", "priority": "low"},
    {"id": 10, "en": "Room Service", "category": "service", "priority": "high"},
]

# Columns that are never language codes in flat rows
RESERVED_COLUMNS = {"id", "en", "name", "category", "priority", "nameAll"}


def sample_records() -> List[AmenityRecord]:
    """The built-in fallback catalogue."""
    return [record_from_dict(item) for item in SAMPLE_AMENITIES]


def record_from_dict(item: Dict[str, Any], language_codes: Optional[Iterable[str]] = None) -> AmenityRecord:
    """
    Normalise one source item into an AmenityRecord.

    Accepts ``{"id", "en" | "name", "nameAll": {...}}`` or flat rows where
    every non-reserved column is a language code.

    Args:
        item: Raw item from the API, JSON snapshot or CSV row
        language_codes: Restrict flat-row language columns to these codes
    """
    english = item.get("en") or item.get("name") or ""
    if isinstance(english, dict):
        english = english.get("en", "")

    translations: Dict[str, str] = {}
    name_all = item.get("nameAll")
    if isinstance(name_all, dict):
        for code, value in name_all.items():
            if code != "en" and isinstance(value, str) and value.strip():
                translations[code] = value
    else:
        allowed = set(language_codes) if language_codes is not None else None
        for column, value in item.items():
            if column in RESERVED_COLUMNS:
                continue
            if allowed is not None and column not in allowed:
                continue
            if isinstance(value, str) and value.strip():
                translations[column] = value

    return AmenityRecord(
        id=item.get("id"),
        english_text=str(english).strip(),
        translations=translations,
        category=item.get("category"),
        priority=item.get("priority"),
    )


class AmenitySource:
    """Source data provider for amenity records."""

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        """
        Initialize the source.

        Args:
            config: Pipeline configuration (API URL, endpoint, timeout)
            session: HTTP session (a new one if omitted)
        """
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @property
    def url(self) -> str:
        return self.config.amenities_api_url.rstrip("/") + "/" + self.config.amenities_endpoint.lstrip("/")

    def fetch(self) -> List[AmenityRecord]:
        """
        Fetch room amenities from the API.

        Falls back to the built-in sample catalogue when the API cannot be
        reached or answers with an unexpected shape.
        """
        try:
            items = self._fetch_items()
        except DataSourceError as e:
            logger.warning("Failed to fetch amenities from API: %s; using sample data", e)
            return sample_records()

        records = [record_from_dict(item, self.config.language_names) for item in items]
        logger.info("Fetched %d amenities from %s", len(records), self.url)
        return records

    def _fetch_items(self) -> List[Dict[str, Any]]:
        try:
            response = self.session.get(self.url, timeout=self.config.request_timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise DataSourceError(str(e)) from e

        if isinstance(payload, dict) and isinstance(payload.get("data"), list):
            return payload["data"]
        if isinstance(payload, list):
            return payload
        raise DataSourceError(f"Unexpected API response format: {str(payload)[:200]}")

    def load(self, file_path: str) -> List[AmenityRecord]:
        """Load records from a JSON snapshot or a CSV export, by suffix."""
        suffix = Path(file_path).suffix.lower()
        if suffix == ".json":
            return self.load_json(file_path)
        if suffix == ".csv":
            return self.load_csv(file_path)
        raise DataSourceError(f"Expected .json or .csv file, got: {suffix or file_path}")

    def load_json(self, file_path: str) -> List[AmenityRecord]:
        """
        Load records from a JSON file.

        Args:
            file_path: Path to a JSON list (or ``{"data": [...]}``) of amenities

        Returns:
            List of AmenityRecord
        """
        path = Path(file_path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DataSourceError(f"Failed to load amenities from {file_path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("data")
        if not isinstance(data, list):
            raise DataSourceError(f"Expected a list of amenities in {file_path}")

        records = [record_from_dict(item, self.config.language_names) for item in data]
        logger.info("Loaded %d amenities from %s", len(records), file_path)
        return records

    def load_csv(self, file_path: str) -> List[AmenityRecord]:
        """Load records from a CSV with ``id``, ``en`` and one column per language."""
        path = Path(file_path)
        try:
            with open(path, "r", encoding="utf-8-sig", newline="") as f:
                rows = list(csv.DictReader(f))
        except (OSError, csv.Error) as e:
            raise DataSourceError(f"Failed to load amenities from {file_path}: {e}") from e

        if rows and "en" not in rows[0]:
            raise DataSourceError(f"{file_path} has no 'en' column")

        records = [record_from_dict(row, self.config.language_names) for row in rows]
        logger.info("Loaded %d amenities from %s", len(records), file_path)
        return records
