from __future__ import annotations

DEFAULT_INPUT = "data/authors.csv"

# column holding the author's display name; it is also the unique row key
NAME_COLUMN = "Name"

# affiliation slots are stored as numbered column pairs, starting at 1
AFFILIATION_PREFIX = "Affiliation_"
ADDRESS_PREFIX = "Address_"

# columns produced by the flattening step
SLOT_COLUMN = "Slot"
AFFILIATION_COLUMN = "Affiliation"

# pattern used to recognise slot columns and pull out their index
_SLOT_COLUMN_REGEX = r'^(Affiliation|Address)_([1-9]\d*)$'

# glue between an affiliation and its address in the combined string,
# e.g. "University of Oslo, Oslo, Norway"
ADDRESS_SEPARATOR = ", "

# glue between the affiliation numbers of one author ("1,2")
NUMBER_SEPARATOR = ","

# glue between consecutive authors in the author list
AUTHOR_SEPARATOR = ", "

# pandoc-style superscript delimiters: Name^1,2^
SUPERSCRIPT_DELIM = "^"

# marker appended to the first author's numbers and the note explaining it
CORRESPONDING_MARK = "*"
CORRESPONDING_NOTE = "* Corresponding author"

# markdown renders two trailing spaces before a newline as a hard line break
MARKDOWN_HARD_BREAK = "  \n"

# distinct affiliations at or above this similarity are reported as possible
# typos of each other; numbering is never affected
SIM_AFFILIATION_WARN_THRESHOLD = 0.9

# logging
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
