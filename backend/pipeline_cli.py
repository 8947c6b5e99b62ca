# Command line entry point for building, filtering and copying conditional logic maps
#
# Modes:
# - build (default): form definition JSON -> annotated map -> filtered map
# - filter: filter an annotated map produced elsewhere (--annotated-file)

import argparse
from typing import List, Optional

from map_filter import ToggleFlags
from pipeline import (
    FORM_FILE,
    OUTPUT_ANNOTATED,
    OUTPUT_MAP,
    filter_annotated_file,
    run_pipeline,
)

TOGGLE_HELP = {
    "hide_field_number": "Hide the 'Field N' labels",
    "hide_field_type": "Hide the '[Type]' labels",
    "hide_unused": "Hide fields that are not used in any conditional logic",
    "hide_used_by": "Hide 'IS USED BY' lines",
    "hide_depends_on": "Hide the conditions each field depends on",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build and filter the conditional logic map of a form")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["build", "filter"],
        default="build",
        help="build a map from a form definition, or filter an existing annotated map (default: build)"
    )
    parser.add_argument(
        "--form-file",
        type=str,
        default=None,
        help=f"Path to form definition JSON (default: {FORM_FILE})"
    )
    parser.add_argument(
        "--annotated-file",
        type=str,
        default=None,
        help="Annotated map to filter (filter mode)"
    )
    parser.add_argument(
        "--output-annotated",
        type=str,
        default=None,
        help=f"Output file for the annotated map (default: {OUTPUT_ANNOTATED})"
    )
    parser.add_argument(
        "--output-map",
        type=str,
        default=None,
        help=f"Output file for the filtered map (default: {OUTPUT_MAP})"
    )
    for name, help_text in TOGGLE_HELP.items():
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, action="store_true", help=help_text)
    parser.add_argument(
        "--copy",
        action="store_true",
        help="Copy the filtered map to the clipboard"
    )
    parser.add_argument(
        "--print",
        dest="print_map",
        action="store_true",
        help="Print the filtered map to stdout"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution flow; returns the process exit code."""
    args = build_parser().parse_args(argv)
    flags = ToggleFlags.from_mapping(vars(args))

    if args.mode == "filter":
        if not args.annotated_file:
            print("Error: filter mode needs --annotated-file")
            return 2
        result = filter_annotated_file(
            args.annotated_file,
            output_map=args.output_map,
            flags=flags,
            copy=args.copy,
        )
    else:
        result = run_pipeline(
            form_file=args.form_file,
            output_annotated=args.output_annotated,
            output_map=args.output_map,
            flags=flags,
            copy=args.copy,
        )

    if args.print_map and result:
        print()
        print(result, end="")

    return 0 if result else 1


if __name__ == "__main__":
    raise SystemExit(main())
