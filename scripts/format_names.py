"""
Format personal names from the command line.

Examples:
    python scripts/format_names.py --given John --family Doe --format full
    python scripts/format_names.py --given JOHN --family DOE --pattern "LF(f)+jLF(g)"
    python scripts/format_names.py --names authors.json --format given_family --precedes contextual
    python scripts/format_names.py --token-help

The --names file holds a JSON list of component objects, e.g. [{"given": "John", "family": "Doe"}].
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nameformat.name_format import Markup, NameFormatSettings, format_name, get_name_format, token_help
from nameformat.name_format_data import COMPONENT_KEYS, DEFAULT_NAME_FORMATS
from nameformat.name_list import DelimiterPrecedesLast, LastWord, ListFormatSettings, format_names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Format personal names with a name format pattern.")
    for key in COMPONENT_KEYS:
        parser.add_argument(f"--{key}", type=str, default="", help=f"The {key} component.")
    parser.add_argument("--pattern", type=str, default=None, help="Pattern string, e.g. 'g+if'.")
    parser.add_argument(
        "--format",
        type=str,
        default="default",
        choices=sorted(DEFAULT_NAME_FORMATS),
        help="Built-in format to use when --pattern is not given.",
    )
    parser.add_argument("--sep1", type=str, default=" ", help="Separator 1 (token i).")
    parser.add_argument("--sep2", type=str, default=", ", help="Separator 2 (token j).")
    parser.add_argument("--sep3", type=str, default="", help="Separator 3 (token k).")
    parser.add_argument("--markup", action="store_true", help="Wrap components in span elements.")
    parser.add_argument("--names", type=Path, default=None, help="JSON file with a list of names to join.")
    parser.add_argument("--delimiter", type=str, default=", ", help="Delimiter between listed names.")
    parser.add_argument("--and", dest="last_word", choices=[w.value for w in LastWord], default="text")
    parser.add_argument(
        "--precedes",
        choices=[mode.value for mode in DelimiterPrecedesLast],
        default="never",
        help="Whether the delimiter precedes the last word.",
    )
    parser.add_argument("--el-al-min", type=int, default=3, help="Truncate longer lists (0 never truncates).")
    parser.add_argument("--el-al-first", type=int, default=1, help="Names kept when truncating.")
    parser.add_argument("--token-help", action="store_true", help="Print the pattern characters and exit.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.token_help:
        for char, description in token_help().items():
            print(f"{char}\t{description}")
        return 0

    pattern = args.pattern if args.pattern is not None else get_name_format(args.format)
    settings = NameFormatSettings(
        sep1=args.sep1,
        sep2=args.sep2,
        sep3=args.sep3,
        markup=Markup.SPAN if args.markup else Markup.NONE,
    )

    if args.names:
        with open(args.names, encoding="utf-8") as f:
            components_list = json.load(f)
        if not isinstance(components_list, list):
            print(f"ERROR: {args.names} must contain a JSON list of names", file=sys.stderr)
            return 2
        for index, item in enumerate(components_list):
            if not isinstance(item, dict):
                print(f"ERROR: name {index} in {args.names} must be a JSON object", file=sys.stderr)
                return 2
        list_settings = ListFormatSettings(
            delimiter=args.delimiter,
            last_word=LastWord(args.last_word),
            delimiter_precedes_last=DelimiterPrecedesLast(args.precedes),
            el_al_min=args.el_al_min,
            el_al_first=args.el_al_first,
        )
        print(format_names(components_list, pattern, settings, list_settings))
        return 0

    components = {key: getattr(args, key) for key in COMPONENT_KEYS}
    print(format_name(components, pattern, settings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
