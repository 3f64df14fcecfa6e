"""
Data store and placeholder resolution.

The data source is a JSON object with an optional ``title`` string and a
``data`` object mapping placeholder ids to string values::

    {"title": "Loan agreement", "data": {"company": "ACME", "amount": "160000"}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any, Dict, List, Mapping, Optional, Union

from ..diagnostics import DiagnosticCode, Diagnostics
from ..exceptions import DataSourceError

logger = logging.getLogger(__name__)

DataSource = Union[str, Path, IO, Mapping[str, Any]]


class DataStore:
    """
    Read-only snapshot of placeholder values and the document title.

    ``values`` is ``None`` when the source has no usable ``data`` section;
    non-string entries are kept so that resolution can report them.
    """

    def __init__(
        self,
        values: Optional[Mapping[str, Any]] = None,
        title: Optional[str] = None,
    ) -> None:
        self._values: Optional[Dict[str, Any]] = dict(values) if values is not None else None
        self.title = title

    @property
    def has_data(self) -> bool:
        return self._values is not None

    def __contains__(self, key: str) -> bool:
        return self._values is not None and key in self._values

    def get(self, key: str) -> Any:
        if self._values is None:
            return None
        return self._values.get(key)

    def keys(self) -> List[str]:
        return list(self._values or {})

    def __len__(self) -> int:
        return len(self._values or {})

    @classmethod
    def from_mapping(
        cls,
        payload: Mapping[str, Any],
        diagnostics: Optional[Diagnostics] = None,
    ) -> "DataStore":
        if not isinstance(payload, Mapping):
            raise DataSourceError("Data source must be a JSON object", type(payload).__name__)

        title = payload.get("title")
        if title is not None and not isinstance(title, str):
            logger.warning("Data source 'title' is not a string; ignored")
            title = None

        values = None
        if "data" not in payload:
            _report(diagnostics, DiagnosticCode.MISSING_DATA_SECTION,
                    "data source is missing the 'data' key")
        elif not isinstance(payload["data"], Mapping):
            _report(diagnostics, DiagnosticCode.MISSING_DATA_SECTION,
                    "data source 'data' must be an object")
        else:
            values = payload["data"]

        return cls(values=values, title=title)

    @classmethod
    def load(cls, source: DataSource, diagnostics: Optional[Diagnostics] = None) -> "DataStore":
        """Load a store from a mapping, a JSON file path or a readable stream."""
        if isinstance(source, Mapping):
            return cls.from_mapping(source, diagnostics)

        try:
            if isinstance(source, (str, Path)):
                with open(source, "r", encoding="utf-8") as handle:
                    payload = json.load(handle)
            else:
                raw = source.read()
                if isinstance(raw, bytes):
                    raw = raw.decode("utf-8")
                payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DataSourceError("Failed to parse data source", str(exc)) from exc
        except OSError as exc:
            raise DataSourceError("Failed to read data source", str(exc)) from exc

        return cls.from_mapping(payload, diagnostics)


class DataResolver:
    """Looks up placeholder ids in a :class:`DataStore`."""

    def __init__(self, store: Optional[DataStore], diagnostics: Diagnostics) -> None:
        self.store = store
        self.diagnostics = diagnostics

    def resolve(self, placeholder_id: Optional[str]) -> Optional[str]:
        """
        Return the literal value for ``placeholder_id``.

        Returns ``None`` (and reports exactly one diagnostic) when the id is
        absent, the store has no data section, the key is missing, or the
        value is not a string.
        """
        if not placeholder_id:
            self.diagnostics.report(
                DiagnosticCode.MISSING_PLACEHOLDER_ID,
                "value element is missing the 'id' attribute",
                element="value",
            )
            return None

        if self.store is None or not self.store.has_data:
            self.diagnostics.report(
                DiagnosticCode.MISSING_DATA_SECTION,
                f"no data section to resolve '{placeholder_id}'",
                element="value",
            )
            return None

        if placeholder_id not in self.store:
            self.diagnostics.report(
                DiagnosticCode.MISSING_DATA_KEY,
                f"data key '{placeholder_id}' not found",
                element="value",
            )
            return None

        value = self.store.get(placeholder_id)
        if not isinstance(value, str):
            self.diagnostics.report(
                DiagnosticCode.INVALID_DATA_VALUE,
                f"data key '{placeholder_id}' must have a string value",
                element="value",
            )
            return None
        return value


def _report(diagnostics: Optional[Diagnostics], code: DiagnosticCode, message: str) -> None:
    if diagnostics is not None:
        diagnostics.report(code, message)
    else:
        logger.warning(message)
