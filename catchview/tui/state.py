"""Selection state shared by the list and the clear action."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ViewerState:
    """Identifier of the message currently shown in the content pane.

    One instance lives as long as the application. It is written only on the
    event loop: by auto-selection and clicks in the message list, and by the
    clear action's reset.
    """

    selected_id: Optional[str] = None

    def select(self, message_id: str) -> None:
        self.selected_id = message_id

    def reset(self) -> None:
        self.selected_id = None

    @property
    def has_selection(self) -> bool:
        return self.selected_id is not None
