"""Writers for amenity snapshots (JSON) and tabular exports (CSV)."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..errors import PersistenceError
from ..models.amenity import AmenityRecord

logger = logging.getLogger(__name__)


class AmenityWriter:
    """Persists the record set at the end of a run."""

    def write_json(self, records: Sequence[AmenityRecord], output_path: str) -> None:
        """
        Write a JSON snapshot of every record and translation.

        Args:
            records: Records to write
            output_path: Path to write the file to
        """
        data = [self._record_to_dict(record) for record in records]

        def _dump(f):
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")  # Trailing newline

        self._write(output_path, _dump)
        logger.info("Amenities saved to: %s", output_path)

    def write_csv(
        self,
        records: Sequence[AmenityRecord],
        output_path: str,
        language_codes: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Write a CSV with ``id``, ``en`` and one column per language.

        Args:
            records: Records to write
            output_path: Path to write the file to
            language_codes: Column order (defaults to every code present, sorted)
        """
        codes = list(language_codes) if language_codes else self._language_codes(records)
        header = ["id", "en"] + codes

        def _dump(f):
            writer = csv.DictWriter(f, fieldnames=header)
            writer.writeheader()
            for record in records:
                row = {"id": record.id, "en": record.english_text}
                for code in codes:
                    row[code] = record.get_translation(code) or ""
                writer.writerow(row)

        self._write(output_path, _dump, newline="")
        logger.info("Results saved to: %s", output_path)

    def _write(self, output_path: str, dump, newline: Optional[str] = None) -> None:
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline=newline) as f:
                dump(f)
        except OSError as e:
            raise PersistenceError(f"Failed to write {output_path}: {e}") from e

    def _language_codes(self, records: Sequence[AmenityRecord]) -> List[str]:
        codes = set()
        for record in records:
            codes.update(record.translations.keys())
        return sorted(codes)

    def _record_to_dict(self, record: AmenityRecord) -> Dict[str, Any]:
        """Convert a record to the snapshot layout."""
        data: Dict[str, Any] = {"id": record.id, "en": record.english_text}
        if record.category:
            data["category"] = record.category
        if record.priority:
            data["priority"] = record.priority
        # Sort by language code for consistent output
        data["nameAll"] = {
            code: record.translations[code] for code in sorted(record.translations)
        }
        return data
