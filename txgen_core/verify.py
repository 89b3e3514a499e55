"""
Output verification for generated datasets.

Loads the four entity files of a run into an in-memory DuckDB database and
checks the properties consumers rely on: unique ids, valid foreign keys,
one address per user, amounts in range and (optionally) exact counts.

Usage:
    report = verify_output("output", "csv", expected={"users": 100})
    if not report.ok:
        print("\\n".join(report.problems))
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import duckdb

from .ids import SHARED
from .logger_utils import get_logger
from .models import ENTITY_KINDS, FILE_STEMS, field_names
from .sinks import sink_path, validate_format

COLUMN_TYPES = {
    "id": "BIGINT",
    "user_id": "BIGINT",
    "provider_id": "BIGINT",
    "amount": "DOUBLE",
}

logger = get_logger(__name__)


@dataclass
class VerifyReport:
    """Outcome of verifying one output directory."""

    output_dir: str
    format: str
    counts: Dict[str, int] = field(default_factory=dict)
    problems: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


def _columns_literal(names: List[str]) -> str:
    pairs = [f"'{name}': '{COLUMN_TYPES.get(name, 'VARCHAR')}'" for name in names]
    return "{" + ", ".join(pairs) + "}"


def _sql_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _has_rows(path: str, fmt: str) -> bool:
    """True if the file holds at least one record (CSV header rows don't count)."""
    with open(path, encoding="utf-8") as f:
        lines = 0
        for line in f:
            if line.strip():
                lines += 1
            if lines > (1 if fmt == "csv" else 0):
                return True
    return False


def _load_table(con, table: str, path: str, fmt: str, names: List[str]) -> None:
    column_defs = ", ".join(f"{name} {COLUMN_TYPES.get(name, 'VARCHAR')}" for name in names)
    con.execute(f"CREATE TABLE {table} ({column_defs})")
    if not _has_rows(path, fmt):
        return
    columns = _columns_literal(names)
    if fmt == "json":
        reader = f"read_json({_sql_string(path)}, format = 'newline_delimited', columns = {columns})"
    else:
        reader = f"read_csv({_sql_string(path)}, header = true, columns = {columns})"
    con.execute(f"INSERT INTO {table} SELECT {', '.join(names)} FROM {reader}")


def verify_output(
    output_dir: str,
    fmt: str = "json",
    address_ids: bool = True,
    expected: Optional[Dict[str, int]] = None,
    id_mode: str = SHARED,
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
) -> VerifyReport:
    """
    Verify the files of one generation run.

    Args:
        output_dir: Directory holding users/addresses/providers/transactions files
        fmt: 'json' or 'csv'
        address_ids: Whether address records carry an id column
        expected: Optional expected record counts keyed by file stem
        id_mode: 'shared' additionally checks ids are unique across all files
        min_amount: Optional exclusive lower bound for transaction amounts (default 0)
        max_amount: Optional exclusive upper bound for transaction amounts

    Returns:
        VerifyReport listing every problem found

    Raises:
        FileNotFoundError: If an entity file is missing
    """
    validate_format(fmt)
    report = VerifyReport(output_dir=output_dir, format=fmt)

    con = duckdb.connect(":memory:")
    try:
        for kind in ENTITY_KINDS:
            stem = FILE_STEMS[kind]
            path = sink_path(output_dir, stem, fmt)
            if not os.path.exists(path):
                raise FileNotFoundError(f"Output file not found: {path}")
            _load_table(con, stem, path, fmt, field_names(kind, address_ids=address_ids))
            report.counts[stem] = con.execute(f"SELECT COUNT(*) FROM {stem}").fetchone()[0]

        # 1. Unique ids per entity
        id_tables = [FILE_STEMS[k] for k in ENTITY_KINDS]
        if not address_ids:
            id_tables.remove("addresses")
        for table in id_tables:
            dupes = con.execute(
                f"SELECT COUNT(*) - COUNT(DISTINCT id) FROM {table}"
            ).fetchone()[0]
            if dupes:
                report.problems.append(f"{table}: {dupes} duplicate id(s)")
            nulls = con.execute(f"SELECT COUNT(*) FROM {table} WHERE id IS NULL").fetchone()[0]
            if nulls:
                report.problems.append(f"{table}: {nulls} record(s) without an id")

        # 2. Unique ids across the whole dataset in shared mode
        if id_mode == SHARED:
            union = " UNION ALL ".join(f"SELECT id FROM {table}" for table in id_tables)
            dupes = con.execute(
                f"SELECT COUNT(*) - COUNT(DISTINCT id) FROM ({union})"
            ).fetchone()[0]
            if dupes:
                report.problems.append(f"{dupes} id(s) shared between entity files")

        # 3. Foreign keys
        fk_checks = [
            ("addresses", "user_id", "users"),
            ("transactions", "user_id", "users"),
            ("transactions", "provider_id", "providers"),
        ]
        for child, column, parent in fk_checks:
            orphans = con.execute(f"""
                SELECT COUNT(*)
                FROM {child} c
                LEFT JOIN {parent} p ON c.{column} = p.id
                WHERE p.id IS NULL
            """).fetchone()[0]
            if orphans:
                report.problems.append(
                    f"{child}.{column}: {orphans} value(s) not found in {parent}.id"
                )

        # 4. One address per user
        unmatched = con.execute("""
            SELECT COUNT(*)
            FROM users u
            LEFT JOIN (SELECT user_id, COUNT(*) AS n FROM addresses GROUP BY user_id) a
              ON a.user_id = u.id
            WHERE a.n IS NULL OR a.n <> 1
        """).fetchone()[0]
        if unmatched:
            report.problems.append(f"addresses: {unmatched} user(s) without exactly one address")

        # 5. Amount bounds
        amount_sql = "SELECT COUNT(*) FROM transactions WHERE amount IS NULL OR amount <= ?"
        params = [float(min_amount) if min_amount is not None else 0.0]
        if max_amount is not None:
            amount_sql += " OR amount >= ?"
            params.append(float(max_amount))
        bad_amounts = con.execute(amount_sql, params).fetchone()[0]
        if bad_amounts:
            report.problems.append(f"transactions: {bad_amounts} amount(s) out of range")

        # 6. Cardinality
        for stem, count in (expected or {}).items():
            if stem not in report.counts:
                raise ValueError(f"Unknown entity file in expected counts: '{stem}'")
            if report.counts[stem] != count:
                report.problems.append(
                    f"{stem}: expected {count:,} record(s), found {report.counts[stem]:,}"
                )
    finally:
        con.close()

    logger.info(
        f"Verified {output_dir}: {'OK' if report.ok else f'{len(report.problems)} problem(s)'}",
        extra={"event": "verify_complete", "path": output_dir, "format": fmt},
    )
    return report
