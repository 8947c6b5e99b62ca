"""End-to-end pipeline: form definition -> annotated map -> filtered map (-> clipboard)."""

import os
from typing import Optional

from dotenv import load_dotenv

from form_map import FormDefinitionError, build_conditional_map, load_form_file
from map_clipboard import copy_to_clipboard_sync, notice_for
from map_filter import MapSession, ToggleFlags, contains_markers

# Load environment variables
load_dotenv()

# Configuration from environment
FORM_FILE = os.getenv("FORM_FILE", "data/form.json")
OUTPUT_ANNOTATED = os.getenv("OUTPUT_ANNOTATED", "output/conditional_map_annotated.txt")
OUTPUT_MAP = os.getenv("OUTPUT_MAP", "output/conditional_map.txt")


def _write_text(path: str, text: str) -> None:
    os.makedirs(os.path.dirname(path) if os.path.dirname(path) else ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def copy_map(text: str) -> bool:
    """Copy the displayed map and print the resulting notice."""
    outcome = copy_to_clipboard_sync(text)
    notice = notice_for(outcome)
    icon = "✅" if notice.type == "success" else "⚠️ "
    print(f"{icon} {notice.message}")
    return notice.type == "success"


def filter_annotated_file(
    annotated_file: str,
    output_map: Optional[str] = None,
    flags: Optional[ToggleFlags] = None,
    copy: bool = False,
) -> str:
    """Filter an annotated map produced elsewhere."""
    output_map = output_map or OUTPUT_MAP

    try:
        with open(annotated_file, "r", encoding="utf-8") as f:
            session = MapSession(f.read(), name=os.path.basename(annotated_file))
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading annotated map: {e}")
        return ""

    if not contains_markers(session.original):
        print(f"⚠️  No map markers found in {annotated_file}, writing it unchanged")

    filtered = session.render(flags)
    _write_text(output_map, filtered)
    print(f"Wrote filtered map to {output_map}")

    if copy:
        copy_map(filtered)
    return filtered


def run_pipeline(
    form_file: Optional[str] = None,
    output_annotated: Optional[str] = None,
    output_map: Optional[str] = None,
    flags: Optional[ToggleFlags] = None,
    copy: bool = False,
) -> str:
    """
    Run the complete pipeline: load form -> build annotated map -> filter -> optionally copy.

    Args:
        form_file: Form definition JSON (default: from env)
        output_annotated: Where to write the annotated map (default: from env)
        output_map: Where to write the filtered map (default: from env)
        flags: Display toggles (default: nothing hidden)
        copy: Copy the filtered map to the clipboard

    Returns:
        str: The filtered map, or "" when the form could not be loaded
    """
    # Use provided values or fall back to environment/config
    form_file = form_file or FORM_FILE
    output_annotated = output_annotated or OUTPUT_ANNOTATED
    output_map = output_map or OUTPUT_MAP

    # Step 1: Load form definition
    try:
        form = load_form_file(form_file)
    except FileNotFoundError:
        print(f"Error: Form file '{form_file}' does not exist")
        return ""
    except FormDefinitionError as e:
        print(f"Error: {e}")
        return ""
    except OSError as e:
        print(f"Error reading form file '{form_file}': {e}")
        return ""
    print(f"📖 Loaded form '{form.title}' with {len(form.fields)} fields")

    # Step 2: Build annotated map
    annotated = build_conditional_map(form)
    _write_text(output_annotated, annotated)
    print(f"Wrote annotated map to {output_annotated}")

    # Step 3: Filter for display
    session = MapSession(annotated, name=form.title)
    filtered = session.render(flags)
    _write_text(output_map, filtered)
    print(f"✅ Map saved: {output_map}")

    # Step 4: Clipboard
    if copy:
        copy_map(filtered)

    return filtered


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Build the conditional logic map of a form")
    parser.add_argument(
        "--form-file",
        type=str,
        default=None,
        help="Path to form definition JSON (default: from env)"
    )
    parser.add_argument(
        "--output-map",
        type=str,
        default=None,
        help="Output file for the filtered map (default: from env)"
    )
    args = parser.parse_args()

    run_pipeline(form_file=args.form_file, output_map=args.output_map)
