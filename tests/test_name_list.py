"""
Tests for joining formatted names into a list.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add the parent directory to path to import nameformat
sys.path.insert(0, str(Path(__file__).parent.parent))

from nameformat.name_format import Markup, NameFormatSettings
from nameformat.name_list import (
    DelimiterPrecedesLast,
    LastWord,
    ListFormatSettings,
    format_list,
    format_names,
)

NEVER = ListFormatSettings(el_al_min=0)
ALWAYS = ListFormatSettings(delimiter_precedes_last=DelimiterPrecedesLast.ALWAYS, el_al_min=0)
CONTEXTUAL = ListFormatSettings(delimiter_precedes_last=DelimiterPrecedesLast.CONTEXTUAL, el_al_min=0)
SYMBOL = ListFormatSettings(last_word=LastWord.SYMBOL, el_al_min=0)

# (names, settings, expected)
LIST_TEST_CASES = [
    ([], NEVER, ""),
    (["A"], NEVER, "A"),
    (["A"], ALWAYS, "A"),
    (["A", "B"], NEVER, "A and B"),
    (["A", "B"], ALWAYS, "A, and B"),
    (["A", "B"], CONTEXTUAL, "A and B"),
    (["A", "B", "C"], NEVER, "A, B and C"),
    (["A", "B", "C"], ALWAYS, "A, B, and C"),
    (["A", "B", "C"], CONTEXTUAL, "A, B, and C"),
    (["A", "B", "C", "D"], CONTEXTUAL, "A, B, C, and D"),
    (["A", "B"], SYMBOL, "A & B"),
    (["A", "B", "C"], SYMBOL, "A, B & C"),
    (["A", "B", "C"], ListFormatSettings(delimiter="; ", el_al_min=0), "A; B and C"),
    # Truncation
    (["A", "B", "C", "D"], ListFormatSettings(el_al_min=3, el_al_first=1), "A et al."),
    (["A", "B", "C", "D"], ListFormatSettings(el_al_min=3, el_al_first=2), "A, B et al."),
    (["A", "B", "C"], ListFormatSettings(el_al_min=3, el_al_first=1), "A, B and C"),
    # Keeping every name is not a truncation
    (["A", "B", "C", "D"], ListFormatSettings(el_al_min=3, el_al_first=4), "A, B, C and D"),
    (["A", "B", "C", "D"], ListFormatSettings(el_al_min=3, el_al_first=9), "A, B, C and D"),
    (["A", "B", "C", "D"], ListFormatSettings(el_al_min=3, el_al_first=0), "A et al."),
    (["A", "B", "C"], ListFormatSettings(el_al_min=2, el_al_first=1, et_al="u. a."), "A u. a."),
]


def test_list_formats():
    """Test every list format case."""
    failed = []
    for names, settings, expected in LIST_TEST_CASES:
        result = format_list(names, settings)
        if result != expected:
            failed.append(f"{names} with {settings}: expected {expected!r}, got {result!r}")
    assert not failed, f"List format tests: {len(failed)} failures out of {len(LIST_TEST_CASES)} tests\n" + "\n".join(
        failed
    )


def test_default_list_format():
    assert ListFormatSettings.create_default() == ListFormatSettings()
    assert format_list(["A", "B"]) == "A and B"
    assert format_list(["A", "B", "C"]) == "A, B and C"
    assert format_list(["A", "B", "C", "D"]) == "A et al."


def test_format_list_accepts_any_iterable():
    assert format_list(name for name in ("A", "B")) == "A and B"
    assert format_list(("A",)) == "A"


def test_format_list_does_not_mutate_input():
    names = ["A", "B", "C", "D"]
    format_list(names)
    assert names == ["A", "B", "C", "D"]


def test_last_word_text():
    assert LastWord.TEXT.word == "and"
    assert LastWord.SYMBOL.word == "&"


def test_settings_from_stored_mapping():
    settings = ListFormatSettings.from_mapping(
        {
            "delimiter": "; ",
            "and": "symbol",
            "delimiter_precedes_last": "contextual",
            "el_al_min": "14",
            "el_al_first": "5",
        }
    )
    assert settings == ListFormatSettings(
        delimiter="; ",
        last_word=LastWord.SYMBOL,
        delimiter_precedes_last=DelimiterPrecedesLast.CONTEXTUAL,
        el_al_min=14,
        el_al_first=5,
    )
    assert format_list(["A", "B", "C"], settings) == "A; B; & C"


def test_settings_from_mapping_with_invalid_values(caplog):
    with caplog.at_level(logging.WARNING):
        settings = ListFormatSettings.from_mapping(
            {"and": "plus", "delimiter_precedes_last": "sometimes", "el_al_min": "many"}
        )
    assert settings.last_word is LastWord.TEXT
    assert settings.delimiter_precedes_last is DelimiterPrecedesLast.NEVER
    assert settings.el_al_min == 3
    assert "plus" in caplog.text
    assert "sometimes" in caplog.text
    assert "many" in caplog.text


def test_settings_from_mapping_rejects_non_mappings():
    with pytest.raises(TypeError):
        ListFormatSettings.from_mapping("never")  # type: ignore[arg-type]


def test_with_et_al():
    settings = ListFormatSettings().with_et_al(0, 1)
    assert format_list(["A", "B", "C", "D", "E"], settings) == "A, B, C, D and E"


def test_format_names_formats_then_joins():
    authors = [
        {"given": "John", "family": "Doe"},
        {"given": "Jane", "family": "Roe"},
        {"given": "", "family": ""},
        {"given": "Ann", "family": "Lee"},
    ]
    list_settings = ListFormatSettings(delimiter_precedes_last=DelimiterPrecedesLast.CONTEXTUAL)
    assert format_names(authors, "g+if", list_settings=list_settings) == "John Doe, Jane Roe, and Ann Lee"
    assert format_names(authors, "xkz", list_settings=list_settings) == "JD, JR, and AL"
    assert format_names(authors, "g+if") == "John Doe, Jane Roe and Ann Lee"
    assert format_names(authors + authors, "f") == "Doe et al."


def test_format_names_with_markup():
    settings = NameFormatSettings(markup=Markup.SPAN)
    result = format_names([{"family": "Doe"}, {"family": "Roe"}], "f", settings)
    assert result == '<span class="family">Doe</span> and <span class="family">Roe</span>'


def test_format_names_with_nothing_to_show():
    assert format_names([], "g") == ""
    assert format_names([{"given": "John"}], "") == ""
