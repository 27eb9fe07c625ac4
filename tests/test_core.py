import pytest
from AffilForge import text_utils, format_utils
from AffilForge.log_utils import logger, LogCategory
from AffilForge.models import AffiliationRegistry, AffiliationSlot, AuthorNumbers

# ===== TEXT HELPERS =====

def test_cell_to_text():
    """
    Test that absent-looking cells become None and real text is stripped.
    """
    test_cases = [
        (None, None),
        (float("nan"), None),
        ("", None),
        ("   ", None),
        ("  University of Oslo ", "University of Oslo"),
        ("NA", "NA"),
        (42, "42"),
    ]

    for input_val, expected in test_cases:
        output = text_utils.to_text(input_val)
        assert output == expected, f"Expected {expected!r} for {input_val!r}, got {output!r}"

def test_affiliation_normalization():
    """
    Test affiliation normalization used for the similarity check.
    """
    test_cases = [
        ("Universität Zürich", "universitat zurich"),
        ("ETH Zurich,  Zurich, Switzerland", "eth zurich zurich switzerland"),
        ("", ""),
        (None, ""),
    ]

    for input_val, expected in test_cases:
        output = text_utils.normalize_affiliation(input_val)
        assert output == expected, f"Expected '{expected}', got '{output}'"

def test_affiliation_similarity():
    """
    Test that spelling variants score high and different institutions low.
    """
    test_cases = [
        ("Universität Zürich, Zürich", "Universitat Zurich, Zurich", True),
        ("University of Hamburg, Hamburg", "Univeristy of Hamburg, Hamburg", True),
        ("University of Hamburg", "Helmholtz-Zentrum Hereon", False),
    ]

    for a, b, should_be_similar in test_cases:
        score = text_utils.affiliation_similarity(a, b)
        assert (score >= 0.9) == should_be_similar, f"Unexpected score {score} for '{a}' vs '{b}'"

def test_latex_escape():
    """
    Test that LaTeX reserved characters are escaped.
    """
    assert text_utils.latex_escape("R&D Lab") == r"R\&D Lab"
    assert text_utils.latex_escape("100% Institute_1") == r"100\% Institute\_1"
    assert text_utils.latex_escape(r"Already \& escaped") == r"Already \& escaped"
    assert text_utils.latex_escape("a~b") == r"a\textasciitilde{}b"

# ===== MODELS =====

def test_slot_combination():
    """
    Test how one affiliation/address pair becomes the combined string.
    """
    assert AffiliationSlot("Uni A", "City, Country").combined() == "Uni A, City, Country"
    assert AffiliationSlot("Uni A", None).combined() == "Uni A"
    assert AffiliationSlot(None, "City").combined() is None
    assert AffiliationSlot().combined() is None

def test_registry_lookup():
    """
    Test registry numbering, membership and iteration order.
    """
    registry = AffiliationRegistry(("B", "A", "C"))

    assert registry.number_of("B") == 1
    assert registry.number_of("C") == 3
    assert "A" in registry and "D" not in registry
    assert list(registry) == ["B", "A", "C"]
    assert list(registry.items()) == [(1, "B"), (2, "A"), (3, "C")]
    assert registry.as_dict() == {"B": 1, "A": 2, "C": 3}

    with pytest.raises(KeyError):
        registry.number_of("D")

    with pytest.raises(ValueError):
        AffiliationRegistry(("A", "A"))

def test_author_number_string():
    """
    Test the comma-joined number string of an author.
    """
    assert AuthorNumbers("Georg", (1, 2)).number_string == "1,2"
    assert AuthorNumbers("Solo", (7,)).number_string == "7"
    assert AuthorNumbers("Nobody").number_string == ""

# ===== FORMATTING =====

def test_author_list_formatting():
    """
    Test the author line: superscripts, corresponding marker and separators.
    """
    authors = (AuthorNumbers("Georg", (1, 2)), AuthorNumbers("Max", (2, 3)))
    assert format_utils.format_author_list(authors) == "Georg^1,2,*^, Max^2,3^"

def test_single_author_formatting():
    """
    Test that a single author gets the marker and no trailing separator.
    """
    authors = (AuthorNumbers("Name", (1, 2)),)
    assert format_utils.format_author_list(authors) == "Name^1,2,*^"

def test_author_without_affiliation_formatting():
    """
    Test authors without affiliations: bare name, or just the marker when first.
    """
    authors = (AuthorNumbers("Lead"), AuthorNumbers("Other", (1,)), AuthorNumbers("Guest"))
    assert format_utils.format_author_list(authors) == "Lead^*^, Other^1^, Guest"

def test_affiliation_list_formatting():
    """
    Test the affiliation block and its markdown hard breaks.
    """
    registry = AffiliationRegistry(("Uni A, City", "Uni B, Town"))
    expected = (
        "* Corresponding author  \n"
        "^1^ Uni A, City  \n"
        "^2^ Uni B, Town  \n"
    )
    assert format_utils.format_affiliation_list(registry) == expected

def test_affiliation_list_without_affiliations():
    """
    Test that an empty registry still renders the corresponding-author note.
    """
    assert format_utils.format_affiliation_list(AffiliationRegistry()) == "* Corresponding author  \n"

def test_markdown_hard_breaks():
    """
    Test newline conversion to markdown hard breaks.
    """
    assert format_utils.markdown_hard_breaks("a\nb\n") == "a  \nb  \n"
    assert format_utils.markdown_hard_breaks("no breaks") == "no breaks"

def test_plain_author_list():
    """
    Test the markup-free author list with and without transliteration.
    """
    names = ["Jürgen Müller", "Zoë Ångström"]
    assert format_utils.format_plain_author_list(names) == "Jürgen Müller, Zoë Ångström"
    assert format_utils.format_plain_author_list(names, ascii_only=True) == "Jurgen Muller, Zoe Angstrom"

def test_latex_author_block():
    """
    Test the \\author / \\affiliation rendering.
    """
    authors = (AuthorNumbers("Georg Ohm", (1, 2)), AuthorNumbers("Max", ()))
    registry = AffiliationRegistry(("R&D Lab, Berlin", "Uni B"))
    expected = (
        "\\author[1,2]{Georg~Ohm}\n"
        "\\author{Max}\n"
        "\n"
        "\\affiliation[1]{R\\&D Lab, Berlin}\n"
        "\\affiliation[2]{Uni B}\n"
    )
    assert format_utils.format_latex_author_block(authors, registry) == expected

# ===== LOGGING =====

def test_log_file_mirroring(tmp_path):
    """
    Test that messages are mirrored to the log file with their category tag.
    """
    log_path = tmp_path / "logs" / "run.log"
    logger.set_log_file(str(log_path))
    try:
        assert logger.log_file_path == str(log_path)
        logger.step("Numbering distinct affiliations", category=LogCategory.NUMBER)
        logger.debug("1: Uni A", category=LogCategory.DEBUG)
    finally:
        logger.close()

    assert logger.log_file_path is None
    content = log_path.read_text(encoding="utf-8")
    assert "[STEP    ] [NUMBER] Numbering distinct affiliations" in content
    assert "[DEBUG] 1: Uni A" in content
    assert "\033[" not in content, "Log file must not contain colour codes"
