"""ChartStore: saved charts kept as a JSON list in a single local file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from cifra.chart_models import Chart, chart_from_dict, chart_to_dict


class ChartStore:
    """
    Local chart persistence.

    The file holds a JSON array of chart objects, in save order. A missing
    file is an empty store; it is created (with parent directories) on the
    first save.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _read(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, list) or not all(isinstance(record, dict) for record in data):
            raise ValueError(f"Chart store '{self.path}' does not contain a list of charts.")
        return data

    def _decode(self, record: dict[str, Any]) -> Chart:
        try:
            return chart_from_dict(record)
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed chart record in '{self.path}': missing or invalid {exc}.") from exc

    def _write(self, records: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(records, fh, ensure_ascii=False, indent=2)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list(self) -> list[Chart]:
        return [self._decode(record) for record in self._read()]

    def get(self, chart_id: str) -> Chart:
        """
        Load one chart.

        Raises:
            ValueError: If no chart has *chart_id*, or its record is malformed.
        """
        for record in self._read():
            if record.get("id") == chart_id:
                return self._decode(record)
        raise ValueError(f"No saved chart with id '{chart_id}'.")

    def save(self, chart: Chart) -> None:
        """Insert *chart*, or replace the stored chart with the same id in place."""
        records = self._read()
        record = chart_to_dict(chart)
        for index, existing in enumerate(records):
            if existing.get("id") == chart.id:
                records[index] = record
                break
        else:
            records.append(record)
        self._write(records)

    def delete(self, chart_id: str) -> None:
        records = self._read()
        remaining = [record for record in records if record.get("id") != chart_id]
        if len(remaining) == len(records):
            raise ValueError(f"No saved chart with id '{chart_id}'.")
        self._write(remaining)
