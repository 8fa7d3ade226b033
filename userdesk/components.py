"""Presentational widgets shared by the HTML pages."""
from __future__ import annotations

import html
from typing import Callable, Optional, Protocol

ScrollListener = Callable[[float], None]


class ScrollSource(Protocol):
    """Something that reports vertical scroll offsets to listeners."""

    def add_listener(self, listener: ScrollListener) -> None: ...

    def remove_listener(self, listener: ScrollListener) -> None: ...


class Viewport(Protocol):
    scroll_behavior: str

    def scroll_to(self, top: float) -> None: ...


class GoToTopButton:
    """Button that appears once the page has scrolled and returns to the top.

    The browser behaviour lives in ``static/js/go-to-top.js``; this class
    carries the same rules so pages can render the initial state and so the
    behaviour can be driven without a browser.
    """

    label = "Back to top"
    element_id = "go-to-top"

    def __init__(self) -> None:
        self._offset = 0.0
        self._source: Optional[ScrollSource] = None

    @property
    def offset(self) -> float:
        return self._offset

    @property
    def visible(self) -> bool:
        return self._offset != 0

    @property
    def mounted(self) -> bool:
        return self._source is not None

    def on_scroll(self, offset: float) -> None:
        self._offset = offset

    def mount(self, source: ScrollSource) -> None:
        if self._source is not None:
            self.unmount()
        # Drop any stale registration before subscribing.
        source.remove_listener(self.on_scroll)
        source.add_listener(self.on_scroll)
        self._source = source

    def unmount(self) -> None:
        if self._source is None:
            return
        self._source.remove_listener(self.on_scroll)
        self._source = None

    def activate(self, viewport: Viewport) -> None:
        viewport.scroll_behavior = "smooth"
        viewport.scroll_to(0)

    def render(self) -> str:
        hidden = "" if self.visible else " hidden"
        label = html.escape(self.label)
        return (
            f'<button type="button" id="{self.element_id}" class="go-to-top" '
            f'aria-label="{label}" title="{label}" data-go-to-top{hidden}>'
            '<svg aria-hidden="true" viewBox="0 0 24 24" width="24" height="24">'
            '<path d="M18.78 15.78a.749.749 0 0 1-1.06 0L12 10.06l-5.72 5.72a.749.749 0 1 1-1.06-1.06l6.25-6.25a.749.749 0 0 1 1.06 0l6.25 6.25a.749.749 0 0 1 0 1.06Z"></path>'
            "</svg>"
            "</button>"
        )


__all__ = ["GoToTopButton", "ScrollSource", "Viewport"]
