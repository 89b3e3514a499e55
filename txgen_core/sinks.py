"""
Streaming record sinks.

A sink owns one output file for one entity kind. Records are serialized the
moment they are written; nothing but the current record is held in memory.

Supported formats:
- json: line-delimited JSON, one compact object per line
- csv: header row of the declared field names, then one row per record
"""

import csv
import json
import os
from typing import Any, Dict, List


class SinkError(RuntimeError):
    """Raised when a sink cannot open, write or close its file."""

    def __init__(self, message: str, path: str, entity: str):
        super().__init__(message)
        self.path = path
        self.entity = entity


class JsonSink:
    """Writes one JSON object per line."""

    format = "json"
    extension = "json"

    def __init__(self, path: str, entity: str, fieldnames: List[str]):
        self.path = path
        self.entity = entity
        self.fieldnames = list(fieldnames)
        self.records_written = 0
        self._file = _open(path, entity)

    def write(self, record: Dict[str, Any]) -> None:
        _check_fields(self, record)
        line = json.dumps(record, ensure_ascii=False, separators=(",", ":"))
        try:
            self._file.write(line + "\n")
        except OSError as e:
            raise SinkError(
                f"Failed to write {self.entity} record to {self.path}: {e}", self.path, self.entity
            ) from e
        self.records_written += 1

    def close(self) -> None:
        _close(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class CsvSink:
    """Writes a header row followed by one row per record."""

    format = "csv"
    extension = "csv"

    def __init__(self, path: str, entity: str, fieldnames: List[str]):
        self.path = path
        self.entity = entity
        self.fieldnames = list(fieldnames)
        self.records_written = 0
        self._file = _open(path, entity, newline="")
        self._writer = csv.writer(self._file)
        try:
            self._writer.writerow(self.fieldnames)
        except OSError as e:
            self._file.close()
            raise SinkError(
                f"Failed to write {entity} header to {path}: {e}", path, entity
            ) from e

    def write(self, record: Dict[str, Any]) -> None:
        _check_fields(self, record)
        try:
            self._writer.writerow([record[name] for name in self.fieldnames])
        except OSError as e:
            raise SinkError(
                f"Failed to write {self.entity} record to {self.path}: {e}", self.path, self.entity
            ) from e
        self.records_written += 1

    def close(self) -> None:
        _close(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


SINK_TYPES = {
    "json": JsonSink,
    "csv": CsvSink,
}

SUPPORTED_FORMATS = tuple(SINK_TYPES)


def validate_format(fmt: str) -> str:
    """
    Validate an output format name.

    Raises:
        ValueError: If the format is not supported
    """
    if fmt not in SINK_TYPES:
        raise ValueError(
            f"Unsupported format: '{fmt}'. Must be one of: {', '.join(SUPPORTED_FORMATS)}"
        )
    return fmt


def sink_path(directory: str, entity_name: str, fmt: str) -> str:
    """Path of the file an entity's sink writes, e.g. output/users.csv."""
    return os.path.join(directory, f"{entity_name}.{SINK_TYPES[validate_format(fmt)].extension}")


def open_sink(directory: str, entity_name: str, fmt: str, fieldnames: List[str]):
    """
    Open a sink for one entity file.

    Args:
        directory: Existing output directory
        entity_name: File stem, e.g. 'users'
        fmt: 'json' or 'csv'
        fieldnames: Declared field names of the entity, in order

    Returns:
        JsonSink or CsvSink

    Raises:
        ValueError: If fmt is unsupported
        SinkError: If the file cannot be created
    """
    path = sink_path(directory, entity_name, fmt)
    return SINK_TYPES[fmt](path, entity_name, fieldnames)


def _open(path: str, entity: str, newline=None):
    try:
        return open(path, "w", encoding="utf-8", newline=newline)
    except OSError as e:
        raise SinkError(f"Unable to create {entity} file {path}: {e}", path, entity) from e


def _close(sink) -> None:
    if sink._file.closed:
        return
    try:
        sink._file.close()
    except OSError as e:
        raise SinkError(
            f"Failed to flush {sink.entity} file {sink.path}: {e}", sink.path, sink.entity
        ) from e


def _check_fields(sink, record: Dict[str, Any]) -> None:
    if list(record) != sink.fieldnames:
        raise SinkError(
            f"Record fields {list(record)} do not match {sink.entity} fields {sink.fieldnames}",
            sink.path,
            sink.entity,
        )
