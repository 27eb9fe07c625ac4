from __future__ import annotations

from typing import List

import pandas as pd

from .config import (
    NAME_COLUMN,
    AFFILIATION_PREFIX,
    ADDRESS_PREFIX,
    SLOT_COLUMN,
    AFFILIATION_COLUMN,
)
from .io_utils import slot_column
from .log_utils import logger, LogCategory
from .models import AffiliationEntry, AffiliationSlot
from .text_utils import to_text


# helper column holding each author's position in the input table
_ORDER_COLUMN = "_author_order"


def combine_affiliations(df: pd.DataFrame, n_slots: int) -> pd.DataFrame:
    """
    Merge every affiliation with its address into one display string per slot.

    The result has the Name column followed by Affiliation_1..Affiliation_N;
    address columns are dropped. A slot without an affiliation stays None, a
    slot without an address keeps the bare affiliation.
    """
    combined = pd.DataFrame({NAME_COLUMN: [to_text(v) for v in df[NAME_COLUMN]]}, index=df.index)

    for i in range(1, n_slots + 1):
        aff_col = slot_column(AFFILIATION_PREFIX, i)
        addr_col = slot_column(ADDRESS_PREFIX, i)
        values: List[object] = []
        for name, aff, addr in zip(combined[NAME_COLUMN], df[aff_col], df[addr_col]):
            slot = AffiliationSlot(affiliation=to_text(aff), address=to_text(addr))
            if slot.affiliation is None and slot.address is not None:
                logger.warn(f"{name}: address '{slot.address}' in slot {i} has no affiliation; ignored",
                            category=LogCategory.COMBINE)
            values.append(slot.combined())
        combined[aff_col] = pd.Series(values, index=df.index, dtype=object)

    logger.debug(f"Combined {n_slots} affiliation slot(s) for {len(combined)} author(s)",
                 category=LogCategory.COMBINE)
    return combined.reset_index(drop=True)


def flatten_affiliations(combined: pd.DataFrame) -> pd.DataFrame:
    """
    Reshape the combined wide table into one row per (author, affiliation).

    Absent slots are dropped. melt() gives no order guarantee worth relying
    on, so rows are sorted back by the author's position in the input and
    then by slot number. Columns: Name, Slot, Affiliation.
    """
    slot_cols = [c for c in combined.columns if c != NAME_COLUMN]
    if not slot_cols:
        return pd.DataFrame(columns=[NAME_COLUMN, SLOT_COLUMN, AFFILIATION_COLUMN])

    wide = combined.copy()
    wide[_ORDER_COLUMN] = range(len(wide))

    long_df = wide.melt(
        id_vars=[_ORDER_COLUMN, NAME_COLUMN],
        value_vars=slot_cols,
        var_name=SLOT_COLUMN,
        value_name=AFFILIATION_COLUMN,
    )
    long_df = long_df[long_df[AFFILIATION_COLUMN].notna()].copy()
    long_df[SLOT_COLUMN] = long_df[SLOT_COLUMN].map(lambda c: int(c[len(AFFILIATION_PREFIX):]))
    long_df = long_df.sort_values([_ORDER_COLUMN, SLOT_COLUMN], kind="stable")

    logger.debug(f"Flattened to {len(long_df)} author/affiliation pair(s)", category=LogCategory.FLATTEN)
    return long_df[[NAME_COLUMN, SLOT_COLUMN, AFFILIATION_COLUMN]].reset_index(drop=True)


def to_affiliation_entries(long_df: pd.DataFrame) -> List[AffiliationEntry]:
    """
    Turn the flattened table into immutable entries, keeping row order.
    """
    return [
        AffiliationEntry(author=row[NAME_COLUMN], slot=int(row[SLOT_COLUMN]), affiliation=row[AFFILIATION_COLUMN])
        for row in long_df.to_dict("records")
    ]
