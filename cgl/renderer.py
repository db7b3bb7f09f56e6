"""Abstract base for user-space renderers driven by a viewer."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Renderer(ABC):
    """A renderer that a viewer initialises, draws and forwards events to.

    Subclasses must provide :meth:`init`, :meth:`render`, :meth:`resize`,
    :meth:`name` and :meth:`info`. Input events are ignored unless overridden.
    """

    use_hdpi: bool = False

    @abstractmethod
    def init(self) -> None:
        """Prepare the renderer before it is first used."""

    @abstractmethod
    def render(self) -> None:
        """Draw one frame."""

    @abstractmethod
    def resize(self, w: int, h: int) -> None:
        """Respond to a change of the drawing area's size."""

    @abstractmethod
    def name(self) -> str:
        """Name used in the window title."""

    @abstractmethod
    def info(self) -> str:
        """Short description shown in the on-screen display."""

    def cursor_event(self, x: float, y: float) -> None:
        """Respond to the cursor moving to screen position (x, y)."""

    def scroll_event(self, offset_x: float, offset_y: float) -> None:
        """Respond to a scroll wheel movement."""

    def mouse_event(self, key: int, event: int, mods: int) -> None:
        """Respond to a mouse button event."""

    def keyboard_event(self, key: int, event: int, mods: int) -> None:
        """Respond to a keyboard event."""

    def use_hdpi_render_target(self) -> None:
        """Mark the render target as a high-DPI one."""
        self.use_hdpi = True