from __future__ import annotations

import csv

import pandas as pd

__all__ = [
    "DECODE_ERRORS",
    "PARSE_ERRORS",
    "CSV_ERRORS",
    "TABLE_ERRORS",
]

# errors that occur when converting file bytes into text using a specific encoding
DECODE_ERRORS = (UnicodeDecodeError, UnicodeError)

# errors raised while interpreting cell values or looking up columns and numbers
PARSE_ERRORS = (ValueError, TypeError, KeyError)

# CSV parsing errors from both the csv module and the pandas reader
CSV_ERRORS = (csv.Error, pd.errors.ParserError, pd.errors.EmptyDataError)

# errors the pipeline raises for an author table it cannot process;
# the loader reports every structural problem as ValueError
TABLE_ERRORS = (ValueError,)
