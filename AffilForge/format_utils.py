from __future__ import annotations

from typing import Iterable, List, Sequence

from .config import (
    AUTHOR_SEPARATOR,
    CORRESPONDING_MARK,
    CORRESPONDING_NOTE,
    MARKDOWN_HARD_BREAK,
    NUMBER_SEPARATOR,
    SUPERSCRIPT_DELIM,
)
from .models import AffiliationRegistry, AuthorNumbers
from .text_utils import latex_escape, strip_accents


__all__ = [
    "superscript",
    "format_author",
    "format_author_list",
    "format_affiliation_list",
    "markdown_hard_breaks",
    "format_plain_author_list",
    "format_latex_author_block",
]


def superscript(text: str) -> str:
    return f"{SUPERSCRIPT_DELIM}{text}{SUPERSCRIPT_DELIM}"


def format_author(author: AuthorNumbers, corresponding: bool = False) -> str:
    """
    Render one author as Name^1,2^. The corresponding author gets the marker
    appended to the numbers (Name^1,2,*^, or Name^*^ without affiliations).
    An author with neither numbers nor the marker is rendered as the bare name.
    """
    marks = [str(n) for n in author.numbers]
    if corresponding:
        marks.append(CORRESPONDING_MARK)
    if not marks:
        return author.name
    return f"{author.name}{superscript(NUMBER_SEPARATOR.join(marks))}"


def format_author_list(author_numbers: Sequence[AuthorNumbers]) -> str:
    """
    Render the author line in input order; the first author is flagged as the
    corresponding author.
    """
    return AUTHOR_SEPARATOR.join(
        format_author(author, corresponding=(idx == 0))
        for idx, author in enumerate(author_numbers)
    )


def markdown_hard_breaks(text: str) -> str:
    """
    Turn every newline into a markdown hard line break (two trailing spaces).
    """
    return text.replace("\n", MARKDOWN_HARD_BREAK)


def format_affiliation_list(registry: AffiliationRegistry) -> str:
    """
    Render the corresponding-author note followed by one ^n^ line per
    affiliation in registry order, each line ending in a hard break.
    """
    lines = [CORRESPONDING_NOTE]
    lines.extend(f"{superscript(str(num))} {aff}" for num, aff in registry.items())
    return markdown_hard_breaks("".join(f"{line}\n" for line in lines))


def format_plain_author_list(names: Iterable[str], ascii_only: bool = False) -> str:
    """
    Comma-separated author names without markup, as asked for by submission
    forms and preprint metadata. With ascii_only the names are transliterated.
    """
    if ascii_only:
        names = (strip_accents(n) for n in names)
    return AUTHOR_SEPARATOR.join(names)


def format_latex_author_block(author_numbers: Sequence[AuthorNumbers], registry: AffiliationRegistry) -> str:
    r"""
    Render the listing for the LaTeX \author[...]{...} / \affiliation[...]{...}
    convention (authblk, elsarticle and friends). Spaces inside names become
    non-breaking ties.
    """
    lines: List[str] = []
    for author in author_numbers:
        name = "~".join(latex_escape(part) for part in author.name.split())
        if author.numbers:
            lines.append(f"\\author[{author.number_string}]{{{name}}}")
        else:
            lines.append(f"\\author{{{name}}}")
    lines.append("")
    for num, aff in registry.items():
        lines.append(f"\\affiliation[{num}]{{{latex_escape(aff)}}}")
    return "\n".join(lines) + "\n"
