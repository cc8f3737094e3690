# ═════════════════════════════════════════════════════════════════════════════════
# PATTERN ALPHABET
# ═════════════════════════════════════════════════════════════════════════════════
#
# A name format pattern is read one character at a time. Every character falls in
# exactly one of these layers:
# 1. TOKENS: replaced with a rendered name component (or a separator)
# 2. MODIFIERS: transform the next piece (case, trim, sanitize, word selection)
# 3. CONDITIONS: keep or drop the next piece depending on its neighbours
# 4. GROUPING: "(" and ")" evaluate the enclosed pattern as one piece
# Anything else, or any character escaped with a backslash, is copied literally.
# ═════════════════════════════════════════════════════════════════════════════════

from types import MappingProxyType

# Component keys, in display order
COMPONENT_KEYS = (
    "title",
    "given",
    "middle",
    "family",
    "generational",
    "credentials",
    "preferred",
    "alternative",
)

# Layer 1: TOKENS
TOKEN_HELP = {
    "t": "Title",
    "p": "Preferred name, use given name if not set",
    "g": "Given name",
    "m": "Middle name(s)",
    "f": "Family name",
    "c": "Credentials",
    "s": "Generational suffix",
    "a": "Alternative value",
    "w": "First letter preferred or given names",
    "x": "First letter given",
    "y": "First letter middle",
    "z": "First letter family",
    "A": "First letter of alternative value",
    "I": "Initials (all) from given and family",
    "J": "Initials (all) from given, middle and family",
    "K": "Initials (all) from given",
    "M": "Initials (all) from given and middle",
    "d": "Conditional: Either the preferred given or family name. "
    "Preferred name is given preference over given or family names.",
    "D": "Conditional: Either the preferred given or family name. "
    "Family name is given preference over preferred or given names.",
    "e": "Conditional: Either the given or family name. Given name is given preference.",
    "E": "Conditional: Either the given or family name. Family name is given preference.",
    "i": "Separator 1",
    "j": "Separator 2",
    "k": "Separator 3",
}

# Layer 2: MODIFIERS
MODIFIER_HELP = {
    "L": "Modifier: Converts the next token to all lowercase.",
    "U": "Modifier: Converts the next token to all uppercase.",
    "F": "Modifier: Converts the first letter to uppercase.",
    "G": "Modifier: Converts the first letter of ALL words to uppercase.",
    "T": "Modifier: Trims whitespace around the next token.",
    "S": "Modifier: Ensures that the next token is safe for the display.",
    "B": "Modifier: Use the first word of the next token.",
    "b": "Modifier: Use the last word of the next token.",
}

# Layer 3: CONDITIONS, listed in the order they are evaluated
CONDITION_HELP = {
    "+": "Conditional: Insert the token if both the surrounding tokens are not empty.",
    "-": "Conditional: Insert the token if the previous token is not empty",
    "~": "Conditional: Insert the token if the previous token is empty",
    "^": "Conditional: Insert the token if the next token is empty.",
    "=": "Conditional: Insert the token if the next token is not empty.",
    "|": "Conditional: Uses the previous token unless empty, otherwise it uses this token.",
}

# Layer 4: ESCAPING AND GROUPING
SYNTAX_HELP = {
    "\\": "You can prevent a character in the format string from being expanded "
    "by escaping it with a preceding backslash.",
    "(": "Group: Start of token grouping.",
    ")": "Group: End of token grouping.",
}

# ═════════════════════════════════════════════════════════════════════════════════
# BUILT-IN FORMATS AND EXAMPLES
# ═════════════════════════════════════════════════════════════════════════════════

# machine name: (label, pattern)
DEFAULT_NAME_FORMATS = {
    "default": ("Default", "((((t+ig)+im)+if)+is)+jc"),
    "family": ("Family", "f"),
    "formal": ("Title Family", "t+if"),
    "full": ("Full", "((((t+ig)+im)+if)+is)+jc"),
    "given": ("Given", "g"),
    "given_family": ("Given Family", "g+if"),
    "short_full": ("Short Full", "((t+ig)+if)"),
}

# Stored list format keys, as saved for the locked "default" list format
DEFAULT_LIST_FORMAT = {
    "delimiter": ", ",
    "and": "text",
    "delimiter_precedes_last": "never",
    "el_al_min": 3,
    "el_al_first": 1,
}

LAST_WORDS = {
    "text": "and",
    "symbol": "&",
}

ET_AL = "et al."

# Sample names used to preview a pattern
EXAMPLE_NAMES = (
    {
        "title": "Mr",
        "given": "John",
        "middle": "Peter Mark",
        "family": "Doe",
        "generational": "Jr.",
        "credentials": "B.Sc., Ph.D.",
    },
    {
        "title": "",
        "given": "JOAN",
        "middle": "SUE",
        "family": "DOE",
        "generational": "",
        "credentials": "",
    },
    {
        "title": "",
        "given": "John",
        "middle": "",
        "family": "Doe",
        "generational": "",
        "credentials": "",
        "preferred": "Johnny",
    },
    {
        "title": "",
        "given": "Jane",
        "middle": "",
        "family": "",
        "generational": "",
        "credentials": "",
    },
    {
        "title": "Dr.",
        "given": "Ángela",
        "middle": "María",
        "family": "de la Cruz",
        "generational": "",
        "credentials": "MD",
        "alternative": "Ángela de la Cruz",
    },
)

# ═════════════════════════════════════════════════════════════════════════════════
# VALIDATION AND IMMUTABLE CREATION
# ═════════════════════════════════════════════════════════════════════════════════


def _assert_single_characters(layer_name, layer_dict):
    """Validate that every key in a layer is exactly one character."""
    for key in layer_dict:
        if len(key) != 1:
            raise ValueError(f"Pattern character in {layer_name} must be one character: {key!r}")


def _assert_disjoint_layers(*layers):
    """Validate that no character belongs to more than one pattern layer."""
    seen = set()
    for layer_name, layer in layers:
        duplicates = seen.intersection(layer.keys())
        if duplicates:
            raise ValueError(f"Pattern characters claimed twice, found in {layer_name}: {duplicates}")
        seen.update(layer.keys())


_assert_single_characters("TOKEN_HELP", TOKEN_HELP)
_assert_single_characters("MODIFIER_HELP", MODIFIER_HELP)
_assert_single_characters("CONDITION_HELP", CONDITION_HELP)
_assert_disjoint_layers(
    ("TOKENS", TOKEN_HELP),
    ("MODIFIERS", MODIFIER_HELP),
    ("CONDITIONS", CONDITION_HELP),
    ("SYNTAX", SYNTAX_HELP),
)

MODIFIER_CHARS = frozenset(MODIFIER_HELP)
CONDITION_CHARS = frozenset(CONDITION_HELP)

TOKEN_HELP = MappingProxyType(TOKEN_HELP)
MODIFIER_HELP = MappingProxyType(MODIFIER_HELP)
CONDITION_HELP = MappingProxyType(CONDITION_HELP)
SYNTAX_HELP = MappingProxyType(SYNTAX_HELP)
DEFAULT_NAME_FORMATS = MappingProxyType(DEFAULT_NAME_FORMATS)
DEFAULT_LIST_FORMAT = MappingProxyType(DEFAULT_LIST_FORMAT)
LAST_WORDS = MappingProxyType(LAST_WORDS)
