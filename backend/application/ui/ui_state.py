from __future__ import annotations

from typing import Optional


class UIState:
    """Ephemeral view flags: trailer modal and sidebar. Never persisted."""

    def __init__(self) -> None:
        self.is_trailer_modal_open = False
        self.current_trailer_key: Optional[str] = None
        self.is_sidebar_open = False

    def open_trailer_modal(self, key: str) -> None:
        self.is_trailer_modal_open = True
        self.current_trailer_key = key

    def close_trailer_modal(self) -> None:
        self.is_trailer_modal_open = False
        self.current_trailer_key = None

    def toggle_sidebar(self) -> None:
        self.is_sidebar_open = not self.is_sidebar_open

    def set_sidebar_open(self, is_open: bool) -> None:
        self.is_sidebar_open = bool(is_open)
