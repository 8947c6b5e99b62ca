"""Editor session holding the immutable annotated original of one map."""

from typing import Any, Mapping, Optional

from map_clipboard import CopyOutcome, copy_to_clipboard

from .map_filter import ToggleFlags, filter_map, strip_markers


class MapSession:
    """
    One map being viewed.

    The annotated original is fixed at construction and every render starts
    from it, so a filtered view is never filtered again.
    """

    __slots__ = ("_original", "name")

    def __init__(self, original: str, name: Optional[str] = None):
        if not isinstance(original, str):
            raise TypeError(f"Annotated map must be a string, got {type(original).__name__}")
        self._original = original
        self.name = name

    @property
    def original(self) -> str:
        return self._original

    def initial_view(self) -> str:
        return strip_markers(self._original)

    def render(self, flags: Optional[ToggleFlags] = None) -> str:
        return filter_map(self._original, flags or ToggleFlags())

    def render_from(self, controls: Optional[Mapping[str, Any]]) -> str:
        """Render from raw UI control states; absent controls count as unchecked."""
        return self.render(ToggleFlags.from_mapping(controls))

    async def copy(self, displayed_text: str, **kwargs) -> CopyOutcome:
        """Copy the text currently on display; see ``map_clipboard.copy_to_clipboard``."""
        return await copy_to_clipboard(displayed_text, **kwargs)

    def __repr__(self):
        return f"MapSession(name={self.name!r}, length={len(self._original)})"
