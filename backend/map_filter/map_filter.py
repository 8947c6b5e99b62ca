"""Filter an annotated conditional-logic map according to the display toggles."""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .markers import DEPENDS_ON, FIELD_ID, FIELD_TYPE, UNUSED, USED_BY


class ToggleFlags(BaseModel):
    """Display toggles of the map view. A toggle that is not supplied is off."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    hide_field_number: bool = Field(default=False, description="Hide the 'Field N' labels")
    hide_field_type: bool = Field(default=False, description="Hide the '[Type]' labels")
    hide_unused: bool = Field(default=False, description="Hide fields not used in any conditional logic")
    hide_used_by: bool = Field(default=False, description="Hide 'IS USED BY' lines")
    hide_depends_on: bool = Field(default=False, description="Hide the condition lines a field depends on")

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "ToggleFlags":
        """
        Build flags from whatever controls a caller has; missing or empty values are off.

        Control states are coerced by pydantic, so "false", "0" and "off" are off
        and "true", "1" and "on" are on. Anything else raises ``ValidationError``.
        """
        if not values:
            return cls()
        return cls.model_validate(
            {name: value for name, value in values.items() if name in cls.model_fields and value not in (None, "")}
        )


def filter_map(original: str, flags: Optional[ToggleFlags] = None) -> str:
    """
    Produce the displayed map from the annotated original.

    Steps run in a fixed order since later ones expect the text shape left
    by earlier ones:
      1. unused blocks (with their trailing blank line)
      2. depends-on lines
      3. used-by lines
      4. field numbers (whole span when hidden, markers only otherwise)
      5. field types (same)
      6. leftover unused markers
    """
    if flags is None:
        flags = ToggleFlags()
    if not original:
        return ""

    content = original

    if flags.hide_unused:
        content = UNUSED.remove_spans(content)

    if flags.hide_depends_on:
        content = DEPENDS_ON.remove_lines(content)

    if flags.hide_used_by:
        content = USED_BY.remove_lines(content)

    if flags.hide_field_number:
        content = FIELD_ID.remove_spans(content)
    else:
        content = FIELD_ID.strip_tokens(content)

    if flags.hide_field_type:
        content = FIELD_TYPE.remove_spans(content)
    else:
        content = FIELD_TYPE.strip_tokens(content)

    content = UNUSED.strip_tokens(content)

    return content


def strip_markers(original: str) -> str:
    """The initial view: every marker removed, nothing hidden."""
    return filter_map(original, ToggleFlags())
