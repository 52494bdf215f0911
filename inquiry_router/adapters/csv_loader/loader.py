"""CSV loader — reads and normalizes engineer, rule and inquiry files."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from inquiry_router.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_bool,
    parse_capabilities,
    parse_int,
    parse_list,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Detect the delimiter (comma/semicolon/tab) of spreadsheet exports."""
    first_line = sample.splitlines()[0] if sample else ""
    counts = {d: first_line.count(d) for d in (",", ";", "\t")}
    best_delim = max(counts, key=counts.get)
    if counts[best_delim] == 0:
        return csv.excel

    class DynamicDialect(csv.excel):
        delimiter = best_delim

    return DynamicDialect


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization."""
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = [
            {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            for raw_row in reader
        ]

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_engineers(file_path: Path) -> list[dict]:
    """Load the engineers CSV.

    Expected columns: name (or full_name), email, capabilities
    ('bolts:4; nuts:2'), max_daily_assignments, is_active.
    """
    engineers = []
    for row in _read_csv(file_path):
        name = row.get("full_name") or row.get("name")
        if not name:
            logger.warning("Engineer row without a name skipped: %s", row)
            continue
        engineers.append({
            "full_name": name,
            "email": row.get("email"),
            "capabilities": parse_capabilities(row.get("capabilities") or row.get("skills")),
            "max_daily_assignments": parse_int(row.get("max_daily_assignments")),
            "is_active": parse_bool(row.get("is_active"), default=True),
        })
    logger.info("Parsed %d engineers", len(engineers))
    return engineers


def load_rules(file_path: Path) -> list[dict]:
    """Load the assignment rules CSV.

    Expected columns: rule_name, rule_type, priority, product_categories,
    min_skill_level, auto_assign, is_active.
    """
    rules = []
    for row in _read_csv(file_path):
        rule_type = (row.get("rule_type") or "load_balance").lower()
        conditions: dict = {
            "product_categories": parse_list(row.get("product_categories")),
            "auto_assign": parse_bool(row.get("auto_assign"), default=True),
        }
        min_level = parse_int(row.get("min_skill_level"))
        if min_level is not None:
            conditions["min_skill_level"] = min_level
        rules.append({
            "rule_name": row.get("rule_name") or f"{rule_type} rule",
            "rule_type": rule_type,
            "priority": parse_int(row.get("priority"), default=100),
            "conditions": conditions,
            "is_active": parse_bool(row.get("is_active"), default=True),
        })
    logger.info("Parsed %d rules", len(rules))
    return rules


def load_inquiries(file_path: Path) -> list[dict]:
    """Load the inquiries CSV.

    Expected columns: inquiry_no, customer_name, product_name, product_category.
    """
    inquiries = []
    for row in _read_csv(file_path):
        if not row.get("inquiry_no") or not row.get("product_category"):
            logger.warning("Inquiry row without number or category skipped: %s", row)
            continue
        inquiries.append({
            "inquiry_no": row["inquiry_no"],
            "customer_name": row.get("customer_name"),
            "product_name": row.get("product_name"),
            "product_category": row["product_category"],
        })
    logger.info("Parsed %d inquiries", len(inquiries))
    return inquiries
