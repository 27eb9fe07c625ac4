from __future__ import annotations

import pandas as pd

from .config import NAME_COLUMN, SIM_AFFILIATION_WARN_THRESHOLD
from .format_utils import format_affiliation_list, format_author_list
from .io_utils import validate_author_table
from .log_utils import logger, LogCategory
from .models import AuthorListing
from .numbering import build_registry, find_similar_affiliations, link_author_numbers
from .table_utils import combine_affiliations, flatten_affiliations, to_affiliation_entries


def build_author_listing(table: pd.DataFrame, similarity_threshold: float = SIM_AFFILIATION_WARN_THRESHOLD) -> AuthorListing:
    """
    Run the whole listing pipeline on one author table.

    Validate the column structure, combine each affiliation with its address,
    flatten to one row per author/affiliation pair, number the distinct
    affiliations in first-seen order, link the numbers back to the authors and
    render the author and affiliation strings.

    Raises ValueError if the table is malformed.
    """
    logger.step("Validating author table", category=LogCategory.LOAD)
    n_slots = validate_author_table(table)

    logger.step("Combining affiliations with addresses", category=LogCategory.COMBINE)
    combined = combine_affiliations(table, n_slots)
    authors = list(combined[NAME_COLUMN])

    logger.step("Flattening affiliation slots", category=LogCategory.FLATTEN)
    entries = to_affiliation_entries(flatten_affiliations(combined))

    logger.step("Numbering distinct affiliations", category=LogCategory.NUMBER)
    registry = build_registry(entries)
    for num, aff in registry.items():
        logger.debug(f"{num}: {aff}", category=LogCategory.NUMBER)

    for num_a, num_b, sim in find_similar_affiliations(registry, similarity_threshold):
        logger.warn(f"Affiliations {num_a} and {num_b} are {sim:.0%} similar; check for a spelling variant",
                    category=LogCategory.CHECK)

    logger.step("Linking authors to affiliation numbers", category=LogCategory.LINK)
    author_numbers = link_author_numbers(entries, registry, authors)
    for an in author_numbers:
        if not an.numbers:
            logger.warn(f"{an.name} has no affiliation", category=LogCategory.LINK)

    logger.step("Formatting author and affiliation lists", category=LogCategory.FORMAT)
    listing = AuthorListing(
        author_list=format_author_list(author_numbers),
        affiliation_list=format_affiliation_list(registry),
        registry=registry,
        author_numbers=author_numbers,
    )
    logger.success(f"Listing ready: {len(author_numbers)} author(s), {len(registry)} affiliation(s)",
                   category=LogCategory.FORMAT)
    return listing
