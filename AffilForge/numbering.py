from __future__ import annotations

from itertools import combinations
from typing import Dict, Iterable, List, Sequence, Tuple

from .config import SIM_AFFILIATION_WARN_THRESHOLD
from .log_utils import logger, LogCategory
from .models import AffiliationEntry, AffiliationRegistry, AuthorNumbers
from .text_utils import affiliation_similarity


def build_registry(entries: Iterable[AffiliationEntry]) -> AffiliationRegistry:
    """
    Number the distinct affiliation strings 1..N in the order they are first
    met while walking the (author-ordered) flattened entries.

    Strings are deduplicated by exact equality only, so two authors listing the
    very same combined affiliation share its number.
    """
    seen: Dict[str, None] = {}
    for entry in entries:
        if entry.affiliation:
            seen.setdefault(entry.affiliation, None)
    registry = AffiliationRegistry(tuple(seen))
    logger.debug(f"Registered {len(registry)} distinct affiliation(s)", category=LogCategory.NUMBER)
    return registry


def link_author_numbers(
    entries: Sequence[AffiliationEntry],
    registry: AffiliationRegistry,
    authors: Sequence[str],
) -> Tuple[AuthorNumbers, ...]:
    """
    Attach the registry numbers to every author, one result per author in the
    order of `authors`.

    Entries whose affiliation is empty or unknown to the registry are filtered
    out before the lookup. Within one author the numbers keep the order of the
    entries (slot order); an affiliation listed twice by the same author is
    kept once.
    """
    by_author: Dict[str, List[int]] = {name: [] for name in authors}

    for entry in entries:
        if not entry.affiliation or entry.affiliation not in registry:
            continue
        if entry.author not in by_author:
            raise KeyError(f"Affiliation entry for unknown author '{entry.author}'")
        number = registry.number_of(entry.affiliation)
        numbers = by_author[entry.author]
        if number in numbers:
            logger.warn(f"{entry.author}: affiliation {number} listed more than once; kept once",
                        category=LogCategory.LINK)
            continue
        numbers.append(number)

    return tuple(AuthorNumbers(name=name, numbers=tuple(by_author[name])) for name in authors)


def find_similar_affiliations(
    registry: AffiliationRegistry,
    threshold: float = SIM_AFFILIATION_WARN_THRESHOLD,
) -> List[Tuple[int, int, float]]:
    """
    Report pairs of distinct affiliations that look like spelling variants of
    each other, as (number_a, number_b, similarity) with number_a < number_b.

    Numbers are never merged; identical text is the only thing that shares a
    number.
    """
    pairs: List[Tuple[int, int, float]] = []
    for (num_a, aff_a), (num_b, aff_b) in combinations(registry.items(), 2):
        sim = affiliation_similarity(aff_a, aff_b)
        if sim >= threshold:
            pairs.append((num_a, num_b, sim))
    return pairs
