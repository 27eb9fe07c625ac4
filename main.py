from __future__ import annotations

from typing import Optional

import pandas as pd

from AffilForge.exceptions import TABLE_ERRORS
from AffilForge.format_utils import format_latex_author_block, format_plain_author_list
from AffilForge.io_utils import example_author_table
from AffilForge.log_utils import logger, LogCategory
from AffilForge.pipeline import build_author_listing


def main(table: Optional[pd.DataFrame] = None, log_file: Optional[str] = None) -> int:
    """
    Build the numbered author and affiliation listing for an author table (the
    built-in example when none is given) and print both strings, followed
    by the LaTeX author block and a plain ASCII author list for metadata forms.

    Returns 0 on success and 2 when the table cannot be processed.
    """
    if log_file:
        logger.set_log_file(log_file)

    logger.step("AffilForge run started", category=LogCategory.PLAN)

    if table is None:
        table = example_author_table()
        logger.info("Using built-in example author table", category=LogCategory.PLAN)

    try:
        listing = build_author_listing(table)
    except TABLE_ERRORS as e:
        logger.error(f"Invalid author table: {e}", category=LogCategory.ERROR)
        logger.close()
        return 2

    print(listing.author_list)
    print()
    print(listing.affiliation_list)
    print(format_latex_author_block(listing.author_numbers, listing.registry))
    print(format_plain_author_list([a.name for a in listing.author_numbers], ascii_only=True))

    logger.step("Run complete", category=LogCategory.PLAN)
    logger.info(f"Log file: {logger.log_file_path or 'n/a'}", category=LogCategory.PLAN)
    logger.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
