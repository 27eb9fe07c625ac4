import re
import pytest
from AffilForge.config import (
    NAME_COLUMN,
    AFFILIATION_PREFIX,
    ADDRESS_PREFIX,
    AFFILIATION_COLUMN,
    CORRESPONDING_MARK,
    CORRESPONDING_NOTE,
    MARKDOWN_HARD_BREAK,
    SIM_AFFILIATION_WARN_THRESHOLD,
    _SLOT_COLUMN_REGEX,
)

def test_slot_column_pattern():
    """
    Test that the slot pattern recognises both column kinds and nothing else.
    """
    for col, expected in [
        (f"{AFFILIATION_PREFIX}1", ("Affiliation", "1")),
        (f"{ADDRESS_PREFIX}12", ("Address", "12")),
        (NAME_COLUMN, None),
        ("Affiliation_", None),
        ("Affiliation_x", None),
        ("Affiliation_01", None),
        ("Address_0", None),
    ]:
        m = re.match(_SLOT_COLUMN_REGEX, col)
        assert (m.groups() if m else None) == expected, f"Unexpected match for {col}"

def test_flattened_column_matches_prefix():
    """
    Test that the flattened affiliation column is the slot prefix without its separator.
    """
    assert AFFILIATION_PREFIX == f"{AFFILIATION_COLUMN}_"

def test_corresponding_note_uses_marker():
    """
    Test that the note line explains the same marker used in the author list.
    """
    assert CORRESPONDING_NOTE.startswith(CORRESPONDING_MARK)

def test_markdown_hard_break():
    """
    Test that the hard break is two trailing spaces plus a newline.
    """
    assert MARKDOWN_HARD_BREAK == "  \n"

def test_similarity_threshold_range():
    """
    Test that the similarity threshold is a usable ratio.
    """
    assert isinstance(SIM_AFFILIATION_WARN_THRESHOLD, float)
    assert 0.5 < SIM_AFFILIATION_WARN_THRESHOLD <= 1.0, \
        f"SIM_AFFILIATION_WARN_THRESHOLD out of range ({SIM_AFFILIATION_WARN_THRESHOLD})"
