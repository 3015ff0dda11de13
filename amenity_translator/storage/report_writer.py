"""Writer for the machine-readable validation report."""

import json
import logging
from pathlib import Path

from ..errors import PersistenceError
from ..models.quality_report import RunSummary

logger = logging.getLogger(__name__)


class ReportWriter:
    """Writes a RunSummary as the validation report JSON."""

    def write(self, summary: RunSummary, output_path: str) -> None:
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(summary.to_dict(), f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            raise PersistenceError(f"Failed to write {output_path}: {e}") from e
        logger.info("Detailed report saved to: %s", output_path)
