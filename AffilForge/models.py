from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from .config import ADDRESS_SEPARATOR, NUMBER_SEPARATOR


@dataclass(frozen=True)
class AffiliationSlot:
    """
    One affiliation/address column pair of an author row. Either part may be
    absent (None).
    """
    affiliation: Optional[str] = None
    address: Optional[str] = None

    def combined(self) -> Optional[str]:
        """
        Return the display string used as the deduplication key, or None when
        the slot has no affiliation.
        """
        if not self.affiliation:
            return None
        if not self.address:
            return self.affiliation
        return f"{self.affiliation}{ADDRESS_SEPARATOR}{self.address}"


@dataclass(frozen=True)
class AuthorRecord:
    """
    Store a single author row: the display name, which doubles as the unique
    key, and the fixed-size tuple of affiliation slots in column order.
    """
    name: str
    slots: Tuple[AffiliationSlot, ...] = ()


@dataclass(frozen=True)
class AffiliationEntry:
    """
    One row of the flattened table: an author paired with one of their
    combined affiliation strings and the slot it came from (1-based).
    """
    author: str
    slot: int
    affiliation: str


@dataclass(frozen=True)
class AuthorNumbers:
    name: str
    numbers: Tuple[int, ...] = ()

    @property
    def number_string(self) -> str:
        return NUMBER_SEPARATOR.join(str(n) for n in self.numbers)


@dataclass(frozen=True)
class AffiliationRegistry:
    """
    Ordered mapping from distinct combined affiliation string to its 1-based
    number. Iteration follows the numbering, which is the order in which the
    affiliations were first seen.
    """
    affiliations: Tuple[str, ...] = ()
    _numbers: Dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(set(self.affiliations)) != len(self.affiliations):
            raise ValueError("Registry affiliations must be distinct")
        # frozen dataclass, so the lookup table is filled through object.__setattr__
        object.__setattr__(self, "_numbers", {a: i for i, a in enumerate(self.affiliations, 1)})

    def number_of(self, affiliation: str) -> int:
        """
        Return the number assigned to an affiliation; raises KeyError for
        strings that were never registered.
        """
        return self._numbers[affiliation]

    def items(self) -> Iterator[Tuple[int, str]]:
        return ((i, a) for i, a in enumerate(self.affiliations, 1))

    def as_dict(self) -> Dict[str, int]:
        return dict(self._numbers)

    def __contains__(self, affiliation: object) -> bool:
        return affiliation in self._numbers

    def __iter__(self) -> Iterator[str]:
        return iter(self.affiliations)

    def __len__(self) -> int:
        return len(self.affiliations)


@dataclass(frozen=True)
class AuthorListing:
    """
    Final result of the pipeline: the two strings ready to be embedded in a
    markdown document, plus the intermediate registry and author numbers they
    were rendered from.
    """
    author_list: str
    affiliation_list: str
    registry: AffiliationRegistry
    author_numbers: Tuple[AuthorNumbers, ...]
