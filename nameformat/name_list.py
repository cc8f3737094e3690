"""
Name List Module

Joins several already formatted names into one natural language list:

```python
from nameformat.name_list import ListFormatSettings, DelimiterPrecedesLast, format_list

format_list(["A", "B"])
# Returns: "A and B"

format_list(["A", "B", "C"], ListFormatSettings(delimiter_precedes_last=DelimiterPrecedesLast.CONTEXTUAL))
# Returns: "A, B, and C"

format_list(["A", "B", "C", "D"])
# Returns: "A et al."
```

The joiner never calls back into the pattern interpreter. `format_names` is the one place
where both are combined: it formats each name with a pattern and joins the results.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from nameformat.name_format import NameComponents, NameFormatParser, NameFormatSettings
from nameformat.name_format_data import DEFAULT_LIST_FORMAT, ET_AL, LAST_WORDS


class LastWord(Enum):
    """Word joining the last two names."""

    TEXT = "text"
    SYMBOL = "symbol"

    @property
    def word(self) -> str:
        return LAST_WORDS[self.value]


class DelimiterPrecedesLast(Enum):
    """Whether the delimiter is also placed before the last word."""

    NEVER = "never"
    ALWAYS = "always"
    CONTEXTUAL = "contextual"


_EnumT = TypeVar("_EnumT", bound=Enum)


def _enum_setting(enum_cls: Type[_EnumT], raw: object, default: _EnumT, key: str) -> _EnumT:
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(str(raw).lower())
    except ValueError:
        logging.warning(f"Invalid list format value {key}={raw!r}, using {default.value!r}")
        return default


def _int_setting(raw: object, default: int, key: str) -> int:
    try:
        return int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        logging.warning(f"Invalid list format value {key}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class ListFormatSettings:
    """Immutable list format: delimiter, last word and "et al." truncation.

    el_al_min is the largest list shown in full (0 never truncates); longer lists
    keep their first el_al_first names followed by et_al.
    """

    delimiter: str = ", "
    last_word: LastWord = LastWord.TEXT
    delimiter_precedes_last: DelimiterPrecedesLast = DelimiterPrecedesLast.NEVER
    el_al_min: int = 3
    el_al_first: int = 1
    et_al: str = ET_AL

    @classmethod
    def create_default(cls) -> "ListFormatSettings":
        """Settings of the locked "default" list format."""
        return cls.from_mapping(DEFAULT_LIST_FORMAT)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "ListFormatSettings":
        """Build settings from stored list format values.

        Keys: delimiter, and, delimiter_precedes_last, el_al_min, el_al_first.
        Missing keys take the defaults, invalid values are logged and replaced.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError(f"list format settings must be a mapping, got {type(mapping).__name__}")

        defaults = cls()
        return cls(
            delimiter=str(mapping.get("delimiter", defaults.delimiter)),
            last_word=_enum_setting(LastWord, mapping.get("and", defaults.last_word), defaults.last_word, "and"),
            delimiter_precedes_last=_enum_setting(
                DelimiterPrecedesLast,
                mapping.get("delimiter_precedes_last", defaults.delimiter_precedes_last),
                defaults.delimiter_precedes_last,
                "delimiter_precedes_last",
            ),
            el_al_min=_int_setting(mapping.get("el_al_min", defaults.el_al_min), defaults.el_al_min, "el_al_min"),
            el_al_first=_int_setting(
                mapping.get("el_al_first", defaults.el_al_first), defaults.el_al_first, "el_al_first"
            ),
            et_al=str(mapping.get("et_al", defaults.et_al)),
        )

    def with_et_al(self, el_al_min: int, el_al_first: int) -> "ListFormatSettings":
        """Immutable update method for the truncation limits."""
        return replace(self, el_al_min=el_al_min, el_al_first=el_al_first)


def format_list(names: Iterable[str], settings: Optional[ListFormatSettings] = None) -> str:
    """
    Join rendered names into a single list.

    Args:
        names: Already formatted names, in display order
        settings: List format (the default list format if omitted)

    Returns:
        The joined list; "" for no names
    """
    settings = settings or ListFormatSettings.create_default()
    names = list(names)

    if settings.el_al_min > 0 and len(names) > settings.el_al_min:
        first = max(settings.el_al_first, 1)
        # Keeping every name is not a truncation
        if first < len(names):
            return f"{settings.delimiter.join(names[:first])} {settings.et_al}"

    if not names:
        return ""
    if len(names) == 1:
        return names[0]

    mode = settings.delimiter_precedes_last
    precedes = mode is DelimiterPrecedesLast.ALWAYS or (mode is DelimiterPrecedesLast.CONTEXTUAL and len(names) > 2)
    word = settings.last_word.word
    last_join = f"{settings.delimiter}{word} " if precedes else f" {word} "

    return settings.delimiter.join(names[:-1]) + last_join + names[-1]


def format_names(
    components_list: Sequence[Union[NameComponents, Mapping[str, object]]],
    pattern: str,
    settings: Optional[NameFormatSettings] = None,
    list_settings: Optional[ListFormatSettings] = None,
) -> str:
    """Format every name with the pattern, drop empty results and join the rest."""
    parser = NameFormatParser(settings)
    rendered: List[str] = []
    for components in components_list:
        formatted = parser.format(components, pattern)
        if formatted:
            rendered.append(formatted)
    return format_list(rendered, list_settings)
