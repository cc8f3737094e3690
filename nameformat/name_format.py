"""
Name Format Parser Module

This module renders personal names from their discrete components (title, given, middle,
family, generational suffix, credentials and the preferred/alternative aliases) using short,
human-authored pattern strings.

## Overview

A pattern is a string of single-character instructions:

- **Tokens** (`t g p m f c s a w x y z A I J K M d D e E i j k`) are replaced with a rendered
  component, an initial, a fallback between two components, or one of the three separators
- **Modifiers** (`L U F G T S B b`) transform the next piece: lowercase, uppercase, first
  letter uppercase, every word uppercase, trim, HTML-escape, first word, last word
- **Conditions** (`+ - ~ ^ = |`) keep or drop the next piece depending on whether its
  neighbours rendered to an empty value
- **Groups** (`(` ... `)`) evaluate the enclosed pattern as a single piece
- **Escapes** (`\\x`) copy `x` literally; any character that is none of the above is copied too

## Processing Pipeline

1. **Token table**: components and settings are rendered into a read-only character map
2. **Tokenization**: the pattern is split into plain and escaped characters
3. **Parsing**: the stream is parsed into a small tree of Literal/Escape/Token/Group nodes,
   each node carrying the modifiers and conditions that were pending when it was read
4. **Evaluation**: every node becomes a piece (groups recurse), modifiers are applied
5. **Conditional resolution**: pieces are kept or dropped based on their neighbours

Malformed patterns never raise. Unmatched brackets and unknown characters are emitted
literally and an empty pattern renders as an empty string.

## Usage Examples

```python
from nameformat.name_format import format_name

format_name({"given": "John", "family": "Doe"}, "g+if")
# Returns: "John Doe"

format_name({"given": "John"}, "g+if")
# Returns: "John"

format_name({"given": "john", "family": "DOE"}, "LF(f)+jG(g)")
# Returns: "Doe, John"
```

## Thread Safety

Every call builds its own token table and piece list from immutable inputs, so the
functions and `NameFormatParser` instances can be shared freely between threads.
"""

from __future__ import annotations
import html
import logging
import re
import string
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from nameformat.name_format_data import (
    COMPONENT_KEYS,
    CONDITION_CHARS,
    CONDITION_HELP,
    DEFAULT_NAME_FORMATS,
    EXAMPLE_NAMES,
    MODIFIER_CHARS,
    MODIFIER_HELP,
    SYNTAX_HELP,
    TOKEN_HELP,
)


# ════════════════════════════════════════════════════════════════════════════════
# COMPILED REGEX PATTERNS
# ════════════════════════════════════════════════════════════════════════════════

# Backspace, comma or whitespace: one character per boundary
_DEFAULT_BOUNDARY = r"[\b,\s]"
_DEFAULT_BOUNDARY_PATTERN = re.compile(_DEFAULT_BOUNDARY)

# Markup produced by render_component (span tags and escaped entities), split out only
# under Markup.SPAN; the capture group keeps the markup in re.split output
_MARKUP_PATTERN = re.compile(r"(</?span\b[^>]*>|&(?:#\w+|[A-Za-z]\w*);)", re.IGNORECASE)

# Nested groups beyond this depth are emitted literally, token letters included
# (a capped "(g)" prints "(g)", not the given name)
MAX_GROUP_DEPTH = 32

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


# ════════════════════════════════════════════════════════════════════════════════
# NAME COMPONENTS AND SETTINGS
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class NameComponents:
    """Immutable set of name components. Unset components are empty strings."""

    title: str = ""
    given: str = ""
    middle: str = ""
    family: str = ""
    generational: str = ""
    credentials: str = ""
    preferred: str = ""
    alternative: str = ""

    @classmethod
    def from_mapping(cls, mapping: Union["NameComponents", Mapping[str, object]]) -> "NameComponents":
        """Build components from a plain key -> value mapping without mutating it."""
        if isinstance(mapping, NameComponents):
            return mapping
        if not isinstance(mapping, Mapping):
            raise TypeError(f"name components must be a mapping, got {type(mapping).__name__}")

        values: Dict[str, str] = {}
        for key, value in mapping.items():
            if key not in COMPONENT_KEYS:
                logging.debug(f"Ignoring unknown name component {key!r}")
                continue
            values[key] = "" if value is None else str(value)
        return cls(**values)

    def with_aliases(self, preferred: Optional[str] = None, alternative: Optional[str] = None) -> "NameComponents":
        """Immutable update for the externally sourced preferred/alternative values."""
        return replace(
            self,
            preferred=self.preferred if preferred is None else preferred,
            alternative=self.alternative if alternative is None else alternative,
        )


class Markup(Enum):
    """How rendered components are wrapped."""

    NONE = "none"
    SPAN = "span"


@dataclass(frozen=True)
class NameFormatSettings:
    """Immutable formatting settings: separators, markup flag and word boundary."""

    sep1: str = " "
    sep2: str = ", "
    sep3: str = ""
    markup: Markup = Markup.NONE
    boundary: re.Pattern[str] = _DEFAULT_BOUNDARY_PATTERN

    @classmethod
    def create_default(cls) -> "NameFormatSettings":
        return cls()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "NameFormatSettings":
        """Build settings from plain configuration values.

        Invalid markup or boundary values are logged and replaced with the defaults.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError(f"name format settings must be a mapping, got {type(mapping).__name__}")

        settings = cls.create_default()
        separators = {key: str(mapping[key]) for key in ("sep1", "sep2", "sep3") if mapping.get(key) is not None}
        if separators:
            settings = replace(settings, **separators)

        markup = mapping.get("markup")
        if isinstance(markup, Markup):
            settings = settings.with_markup(markup)
        elif isinstance(markup, bool):
            settings = settings.with_markup(Markup.SPAN if markup else Markup.NONE)
        elif markup is not None:
            try:
                settings = settings.with_markup(Markup(str(markup).lower()))
            except ValueError:
                logging.warning(f"Unknown markup setting {markup!r}, using {settings.markup.value!r}")

        boundary = mapping.get("boundary")
        if boundary:
            try:
                settings = settings.with_boundary(str(boundary))
            except re.error as e:
                logging.warning(f"Invalid boundary expression {boundary!r}: {e}. Using default.")
        return settings

    def with_separators(
        self, sep1: Optional[str] = None, sep2: Optional[str] = None, sep3: Optional[str] = None
    ) -> "NameFormatSettings":
        """Immutable update method for the separator tokens."""
        return replace(
            self,
            sep1=self.sep1 if sep1 is None else sep1,
            sep2=self.sep2 if sep2 is None else sep2,
            sep3=self.sep3 if sep3 is None else sep3,
        )

    def with_markup(self, markup: Markup) -> "NameFormatSettings":
        return replace(self, markup=markup)

    def with_boundary(self, boundary: Union[str, re.Pattern[str]]) -> "NameFormatSettings":
        """Immutable update method for the word boundary used by the B and b modifiers."""
        pattern = boundary if isinstance(boundary, re.Pattern) else re.compile(boundary)
        return replace(self, boundary=pattern)


# ════════════════════════════════════════════════════════════════════════════════
# UNICODE HELPERS
# ════════════════════════════════════════════════════════════════════════════════


def explode(text: str) -> List[str]:
    """Split text into words on any Unicode whitespace, dropping empty words."""
    return text.split()


def initials(text: str) -> str:
    """First character of every whitespace-delimited word, ASCII letters uppercased.

    Letters outside ASCII keep their case.

    >>> initials("A fat cat sat on the mat")
    'AFCSOTM'
    >>> initials("Зарегистрируйтесь сейчас на Десятую Международную Конференцию")
    'ЗснДМК'
    """
    return "".join(word[0] for word in explode(text)).translate(_ASCII_UPPER)


# ════════════════════════════════════════════════════════════════════════════════
# TOKEN TABLE
# ════════════════════════════════════════════════════════════════════════════════

TokenTable = Mapping[str, Optional[str]]


def render_component(value: str, component_key: str, markup: Markup) -> str:
    """Render one component value.

    The value is returned untouched unless markup is enabled, in which case it is
    HTML-escaped and wrapped in a span whose class is the component key.
    """
    if not value:
        return ""
    if markup is Markup.SPAN:
        return f'<span class="{html.escape(component_key)}">{html.escape(value)}</span>'
    return value


def build_tokens(
    components: Union[NameComponents, Mapping[str, object]], settings: Optional[NameFormatSettings] = None
) -> TokenTable:
    """Map every token character to its rendered value.

    Missing components render as "". The composite tokens d, D, e and E are None
    (absent) when neither of their sources has a value.
    """
    name = NameComponents.from_mapping(components)
    settings = settings or NameFormatSettings.create_default()
    markup = settings.markup
    preferred_or_given = name.preferred or name.given

    tokens: Dict[str, Optional[str]] = {
        "t": render_component(name.title, "title", markup),
        "g": render_component(name.given, "given", markup),
        "p": render_component(preferred_or_given, "given", markup),
        "m": render_component(name.middle, "middle", markup),
        "f": render_component(name.family, "family", markup),
        "c": render_component(name.credentials, "credentials", markup),
        "a": render_component(name.alternative, "alternative", markup),
        "s": render_component(name.generational, "generational", markup),
        "w": render_component(preferred_or_given[:1], "initial", markup),
        "x": render_component(name.given[:1], "given", markup),
        "y": render_component(name.middle[:1], "middle", markup),
        "z": render_component(name.family[:1], "family", markup),
        "A": render_component(name.alternative[:1], "alternative", markup),
        "I": render_component(initials(f"{name.given} {name.family}"), "initials", markup),
        "J": render_component(initials(f"{name.given} {name.middle} {name.family}"), "initials", markup),
        "K": render_component(initials(name.given), "initials", markup),
        "M": render_component(initials(f"{name.given} {name.middle}"), "initials", markup),
        "i": settings.sep1,
        "j": settings.sep2,
        "k": settings.sep3,
    }

    preferred = tokens["p"]
    given = tokens["g"]
    family = tokens["f"]
    tokens["d"] = preferred or family or None
    tokens["D"] = family or preferred or None
    tokens["e"] = given or family or None
    tokens["E"] = family or given or None

    return MappingProxyType(tokens)


# ════════════════════════════════════════════════════════════════════════════════
# MODIFIER PIPELINE
# ════════════════════════════════════════════════════════════════════════════════


def _ucfirst(text: str) -> str:
    return text[:1].upper() + text[1:]


def _ucwords(text: str) -> str:
    return " ".join(_ucfirst(part) for part in text.split(" "))


def _strip_range(text: str, boundary: re.Pattern[str]) -> Tuple[int, int]:
    if not text.strip():
        return 0, 0
    return len(text) - len(text.lstrip()), len(text.rstrip())


def _first_word_range(text: str, boundary: re.Pattern[str]) -> Tuple[int, int]:
    match = boundary.search(text)
    return 0, match.start() if match else len(text)


def _last_word_range(text: str, boundary: re.Pattern[str]) -> Tuple[int, int]:
    start = 0
    for match in boundary.finditer(text):
        start = match.end()
    return start, len(text)


# Applied to every text run independently
_RUN_MODIFIERS: Dict[str, Callable[[str], str]] = {
    "L": str.lower,
    "U": str.upper,
    "G": _ucwords,
    "S": html.escape,
}

# Select a [start, end) range of the visible text
_RANGE_MODIFIERS: Dict[str, Callable[[str, re.Pattern[str]], Tuple[int, int]]] = {
    "T": _strip_range,
    "B": _first_word_range,
    "b": _last_word_range,
}


def _clip_runs(texts: List[str], start: int, end: int) -> List[str]:
    clipped = []
    offset = 0
    for text in texts:
        run_start = offset
        offset += len(text)
        clipped.append(text[max(start, run_start) - run_start : max(min(end, offset) - run_start, 0)])
    return clipped


def apply_modifiers(
    value: Optional[str],
    modifiers: Sequence[str],
    boundary: re.Pattern[str] = _DEFAULT_BOUNDARY_PATTERN,
    markup: Markup = Markup.NONE,
) -> Optional[str]:
    """Apply modifier characters to a rendered piece, strictly left to right.

    With Markup.SPAN the value is split into tags, entities and text runs and only
    the text runs are transformed, so span markup is never modified. Otherwise the
    value is raw input and is transformed whole. Repeated modifiers run again.
    """
    if not value or not modifiers:
        return value

    runs = _MARKUP_PATTERN.split(value) if markup is Markup.SPAN else [value]
    texts = runs[0::2]
    for modifier in modifiers:
        if modifier in _RUN_MODIFIERS:
            texts = [_RUN_MODIFIERS[modifier](text) for text in texts]
        elif modifier == "F":
            for index, text in enumerate(texts):
                if text:
                    texts[index] = _ucfirst(text)
                    break
        elif modifier in _RANGE_MODIFIERS:
            start, end = _RANGE_MODIFIERS[modifier]("".join(texts), boundary)
            texts = _clip_runs(texts, start, end)

    runs[0::2] = texts
    return "".join(runs)


# ════════════════════════════════════════════════════════════════════════════════
# PATTERN SYNTAX TREE
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Literal:
    """A character copied as-is: unknown characters and unmatched brackets."""

    char: str
    modifiers: str = ""
    conditions: str = ""


@dataclass(frozen=True)
class Escape:
    """A backslash-escaped character."""

    char: str
    modifiers: str = ""
    conditions: str = ""


@dataclass(frozen=True)
class Token:
    char: str
    modifiers: str = ""
    conditions: str = ""


@dataclass(frozen=True)
class Group:
    children: Tuple["Node", ...]
    modifiers: str = ""
    conditions: str = ""


Node = Union[Literal, Escape, Token, Group]

# (character, escaped)
PatternChar = Tuple[str, bool]


def tokenize_pattern(pattern: str) -> List[PatternChar]:
    """Split a pattern into plain and escaped characters.

    A backslash escapes the following character, so a doubled backslash is a
    literal backslash. A trailing lone backslash is dropped.
    """
    stream: List[PatternChar] = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            escaped = next(chars, None)
            if escaped is not None:
                stream.append((escaped, True))
            continue
        stream.append((char, False))
    return stream


def _closing_bracket_position(stream: Sequence[PatternChar], start: int) -> Optional[int]:
    """Index of the ")" matching the "(" at start. Escaped brackets are ignored."""
    depth = 0
    for position in range(start, len(stream)):
        char, escaped = stream[position]
        if escaped:
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return position
    return None


def _parse_stream(stream: Sequence[PatternChar], depth: int) -> Tuple[Node, ...]:
    nodes: List[Node] = []
    modifiers = ""
    conditions = ""
    position = 0

    while position < len(stream):
        char, escaped = stream[position]
        position += 1

        if escaped:
            nodes.append(Escape(char, modifiers, conditions))
        elif char in MODIFIER_CHARS:
            modifiers += char
            continue
        elif char in CONDITION_CHARS:
            conditions += char
            continue
        elif char == "(":
            closing = _closing_bracket_position(stream, position - 1)
            if closing is None:
                nodes.append(Literal(char, modifiers, conditions))
            elif depth >= MAX_GROUP_DEPTH:
                logging.warning(f"Pattern groups nested deeper than {MAX_GROUP_DEPTH} levels are not expanded")
                nodes.append(Literal(char, modifiers, conditions))
                for inner_char, inner_escaped in stream[position : closing + 1]:
                    nodes.append(Escape(inner_char) if inner_escaped else Literal(inner_char))
                position = closing + 1
            else:
                nodes.append(Group(_parse_stream(stream[position:closing], depth + 1), modifiers, conditions))
                position = closing + 1
        elif char in TOKEN_HELP:
            nodes.append(Token(char, modifiers, conditions))
        else:
            nodes.append(Literal(char, modifiers, conditions))

        modifiers = ""
        conditions = ""

    return tuple(nodes)


def parse_pattern(pattern: str) -> Tuple[Node, ...]:
    """Parse a pattern into its syntax tree. Never raises."""
    return _parse_stream(tokenize_pattern(pattern), 0)


# ════════════════════════════════════════════════════════════════════════════════
# EVALUATION AND CONDITIONAL RESOLUTION
# ════════════════════════════════════════════════════════════════════════════════

# (value after modifiers, pending conditions)
Piece = Tuple[Optional[str], str]


def resolve_conditions(pieces: Sequence[Piece]) -> List[Optional[str]]:
    """Keep or drop each piece based on the values of its neighbours.

    The checks run in a fixed order and each satisfied check marks the piece as
    kept; only "|" can drop a piece that an earlier check kept.
    """
    kept: List[Optional[str]] = []
    last_index = len(pieces) - 1

    for index, (value, conditions) in enumerate(pieces):
        if not conditions:
            kept.append(value)
            continue

        previous = pieces[index - 1][0] if index > 0 else None
        following = pieces[index + 1][0] if index < last_index else None

        keep = False
        # Insert if both the surrounding pieces are not empty
        if "+" in conditions and previous and following:
            keep = True
        # Insert if the previous piece is not empty
        if "-" in conditions and previous:
            keep = True
        # Insert if the previous piece is empty
        if "~" in conditions and not previous:
            keep = True
        # Insert if the next piece is empty
        if "^" in conditions and not following:
            keep = True
        # Insert if the next piece is not empty
        if "=" in conditions and following:
            keep = True
        # Use the previous piece unless empty, otherwise this one
        if "|" in conditions:
            keep = not previous

        if keep:
            kept.append(value)

    return kept


def _evaluate(nodes: Sequence[Node], tokens: TokenTable, settings: NameFormatSettings) -> str:
    pieces: List[Piece] = []
    for node in nodes:
        value: Optional[str]
        if isinstance(node, Group):
            value = _evaluate(node.children, tokens, settings)
        elif isinstance(node, Token):
            value = tokens.get(node.char, node.char)
        else:
            value = node.char
        pieces.append((apply_modifiers(value, node.modifiers, settings.boundary, settings.markup), node.conditions))

    return "".join(value for value in resolve_conditions(pieces) if value)


# ════════════════════════════════════════════════════════════════════════════════
# PARSER
# ════════════════════════════════════════════════════════════════════════════════


class NameFormatParser:
    """Formats name components into a string using a pattern."""

    def __init__(self, settings: Optional[NameFormatSettings] = None):
        self._settings = settings or NameFormatSettings.create_default()

    @property
    def settings(self) -> NameFormatSettings:
        return self._settings

    def format(self, components: Union[NameComponents, Mapping[str, object]], pattern: str = "") -> str:
        """
        Main API method: render the components with the pattern.

        Returns "" for an empty pattern. Never raises for any pattern string.
        """
        if not pattern:
            return ""
        return self.format_tokens(build_tokens(components, self._settings), pattern)

    def format_tokens(self, tokens: TokenTable, pattern: str) -> str:
        """Render a pattern against an already built token table."""
        if not pattern:
            return ""
        return _evaluate(parse_pattern(pattern), tokens, self._settings)

    def format_examples(self, pattern: str) -> List[str]:
        """Render the pattern for each of the bundled example names."""
        return [self.format(example, pattern) for example in EXAMPLE_NAMES]


# ════════════════════════════════════════════════════════════════════════════════
# MODULE-LEVEL CONVENIENCE FUNCTIONS
# ════════════════════════════════════════════════════════════════════════════════


def format_name(
    components: Union[NameComponents, Mapping[str, object]],
    pattern: str = "",
    settings: Optional[NameFormatSettings] = None,
) -> str:
    """
    Module-level convenience function for name formatting.

    Args:
        components: Name components, as NameComponents or a plain mapping
        pattern: Pattern string
        settings: Separators, markup and word boundary (defaults if omitted)

    Returns:
        The formatted name
    """
    return NameFormatParser(settings).format(components, pattern)


def format_examples(pattern: str, settings: Optional[NameFormatSettings] = None) -> List[str]:
    """Preview a pattern against the bundled example names."""
    return NameFormatParser(settings).format_examples(pattern)


def get_name_format(machine_name: str) -> str:
    """Pattern of a built-in format, falling back to the default format."""
    if machine_name not in DEFAULT_NAME_FORMATS:
        logging.warning(f"Unknown name format {machine_name!r}, using 'default'")
        machine_name = "default"
    return DEFAULT_NAME_FORMATS[machine_name][1]


def token_help() -> Mapping[str, str]:
    """Descriptions of every supported pattern character, for documentation."""
    descriptions: Dict[str, str] = {}
    for layer in (TOKEN_HELP, SYNTAX_HELP, MODIFIER_HELP, CONDITION_HELP):
        descriptions.update(layer)
    return MappingProxyType(descriptions)
