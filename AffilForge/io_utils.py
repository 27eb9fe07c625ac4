from __future__ import annotations

import os
import re
from typing import Any, Dict, List, Optional

import pandas as pd

from .config import (
    DEFAULT_INPUT,
    NAME_COLUMN,
    AFFILIATION_PREFIX,
    ADDRESS_PREFIX,
    _SLOT_COLUMN_REGEX,
)
from .exceptions import CSV_ERRORS, DECODE_ERRORS
from .log_utils import logger, LogCategory
from .models import AffiliationSlot, AuthorRecord
from .text_utils import to_text


# demonstration table: three slots, shared and missing affiliations included
_EXAMPLE_ROWS: List[Dict[str, Any]] = [
    {
        "Name": "Georg",
        "Affiliation_1": "University of Hamburg",
        "Address_1": "Hamburg, Germany",
        "Affiliation_2": "Max Planck Institute for Meteorology",
        "Address_2": "Hamburg, Germany",
        "Affiliation_3": None,
        "Address_3": None,
    },
    {
        "Name": "Max",
        "Affiliation_1": "Max Planck Institute for Meteorology",
        "Address_1": "Hamburg, Germany",
        "Affiliation_2": "Helmholtz-Zentrum Hereon",
        "Address_2": "Geesthacht, Germany",
        "Affiliation_3": None,
        "Address_3": None,
    },
    {
        "Name": "Anna",
        "Affiliation_1": "University of Hamburg",
        "Address_1": "Hamburg, Germany",
        "Affiliation_2": "Helmholtz-Zentrum Hereon",
        "Address_2": "Geesthacht, Germany",
        "Affiliation_3": "University of Bergen",
        "Address_3": "Bergen, Norway",
    },
]


def _project_root() -> str:
    """
    Return the absolute path to the project root directory, inferred from the location of this module on disk.
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def _candidate_paths(primary: str) -> List[str]:
    """
    Build an ordered list of file paths to try: the path as given and, for
    relative paths, the same path under the project root.
    """
    candidates: List[str] = [primary]
    if not os.path.isabs(primary):
        rooted = os.path.join(_project_root(), primary)
        if rooted not in candidates:
            candidates.append(rooted)
    return candidates


def slot_column(prefix: str, index: int) -> str:
    return f"{prefix}{index}"


def _clean_table(df: pd.DataFrame) -> pd.DataFrame:
    """
    Return a copy of the table with every cell stripped, and absent cells
    (None, NaN, blank strings) stored as None.
    """
    rows = [{col: to_text(val) for col, val in row.items()} for row in df.to_dict("records")]
    return pd.DataFrame(rows, columns=list(df.columns), dtype=object)


def example_author_table() -> pd.DataFrame:
    """
    Return the built-in demonstration author table.
    """
    return author_table_from_records(_EXAMPLE_ROWS)


def author_table_from_records(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Build an author table from a list of row dictionaries, keeping the column
    order of the first row and storing every cell as text or None.
    """
    return _clean_table(pd.DataFrame(rows))


def read_author_table(path: str = DEFAULT_INPUT) -> pd.DataFrame:
    """
    Load an author table from a CSV file. All cells are read as text and empty
    cells become None, so a name like "NA" or "null" is never mistaken for a
    missing value.
    """
    candidates = _candidate_paths(path)
    for p in candidates:
        if not os.path.exists(p):
            continue
        try:
            df = pd.read_csv(p, dtype=str, keep_default_na=False, encoding="utf-8")
        except CSV_ERRORS + DECODE_ERRORS as e:
            raise ValueError(f"Could not parse author table {p}: {e}") from e
        logger.info(f"Read {len(df)} row(s) from {p}", category=LogCategory.LOAD)
        df.columns = [str(c).strip() for c in df.columns]
        return _clean_table(df)

    raise FileNotFoundError(f"Input file not found (tried: {', '.join(candidates)})")


def _slot_indices(columns: List[str], prefix: str) -> List[int]:
    """
    Collect the slot numbers used by columns that carry the given prefix.
    """
    indices: List[int] = []
    for col in columns:
        m = re.match(_SLOT_COLUMN_REGEX, col)
        if m and f"{m.group(1)}_" == prefix:
            indices.append(int(m.group(2)))
    return sorted(indices)


def validate_author_table(df: pd.DataFrame) -> int:
    """
    Check the column structure and key column of an author table and return
    the number of affiliation slots.

    The table must have a Name column plus Affiliation_i / Address_i pairs for
    i = 1..N with no gaps and no other columns. Names must be present and
    unique. Anything else raises ValueError.
    """
    columns = [str(c) for c in df.columns]

    if NAME_COLUMN not in columns:
        raise ValueError(f"Author table has no '{NAME_COLUMN}' column")

    unknown = [c for c in columns if c != NAME_COLUMN and not re.match(_SLOT_COLUMN_REGEX, c)]
    if unknown:
        raise ValueError(f"Unexpected column(s) in author table: {', '.join(unknown)}")

    if len(set(columns)) != len(columns):
        raise ValueError("Author table has duplicate column names")

    aff_slots = _slot_indices(columns, AFFILIATION_PREFIX)
    addr_slots = _slot_indices(columns, ADDRESS_PREFIX)
    if aff_slots != addr_slots:
        missing_addr = sorted(set(aff_slots) - set(addr_slots))
        missing_aff = sorted(set(addr_slots) - set(aff_slots))
        parts = []
        if missing_addr:
            parts.append("no address column for slot(s) " + ", ".join(map(str, missing_addr)))
        if missing_aff:
            parts.append("no affiliation column for slot(s) " + ", ".join(map(str, missing_aff)))
        raise ValueError(f"Mismatched affiliation/address columns: {'; '.join(parts)}")

    n_slots = len(aff_slots)
    if aff_slots != list(range(1, n_slots + 1)):
        raise ValueError(f"Affiliation slots must be numbered 1..{n_slots}, found {aff_slots}")

    if df.empty:
        raise ValueError("Author table contains no authors")

    names = [to_text(v) for v in df[NAME_COLUMN]]
    blank_rows = [i + 1 for i, n in enumerate(names) if n is None]
    if blank_rows:
        raise ValueError(f"Author name missing in row(s) {', '.join(map(str, blank_rows))}")

    seen = set()
    dupes: List[str] = []
    for n in names:
        if n in seen and n not in dupes:
            dupes.append(n)
        seen.add(n)
    if dupes:
        raise ValueError(f"Duplicate author name(s): {', '.join(dupes)}")

    logger.info(f"Author table has {len(df)} author(s) and {n_slots} affiliation slot(s)",
                category=LogCategory.LOAD)
    return n_slots


def to_author_records(df: pd.DataFrame, n_slots: Optional[int] = None) -> List[AuthorRecord]:
    """
    Convert a validated author table into typed records in table order.
    """
    if n_slots is None:
        n_slots = validate_author_table(df)
    records: List[AuthorRecord] = []
    for row in df.to_dict("records"):
        slots = tuple(
            AffiliationSlot(
                affiliation=to_text(row.get(slot_column(AFFILIATION_PREFIX, i))),
                address=to_text(row.get(slot_column(ADDRESS_PREFIX, i))),
            )
            for i in range(1, n_slots + 1)
        )
        records.append(AuthorRecord(name=to_text(row[NAME_COLUMN]), slots=slots))
    return records
