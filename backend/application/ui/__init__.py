from application.ui.ui_state import UIState

__all__ = ["UIState"]
