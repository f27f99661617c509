from typing import Awaitable, Callable

from textual.containers import Horizontal
from textual.widgets import Button
from textual.message import Message

from catchview.core.api_client import MailboxClient
from catchview.tui.state import ViewerState
from catchview.utils.errors import CatchViewError, ErrorHandler
from catchview.utils.logging import async_log_call, get_logger, log_event

logger = get_logger(__name__)

CLEAR_CONFIRMATION = "Are you sure you want to delete all emails?"


class MessageAction(Message):
    """Emitted when a mailbox action is triggered."""
    def __init__(self, action_name: str):
        super().__init__()
        self.action_name = action_name


class MessageActions(Horizontal):
    """Action bar under the message list."""
    def __init__(self):
        super().__init__(id="message-actions")

    def compose(self):
        yield Button("Refresh", id="refresh", variant="primary")
        yield Button("Clear all", id="clear", variant="error")

    def on_button_pressed(self, event: Button.Pressed):
        event.stop()
        self.post_message(MessageAction(event.button.id))


class ClearAction:
    """Deletes every message on the backend once the user has confirmed.

    On success the selection is reset and the list is refreshed right away.
    A failed clear changes nothing and is only written to the log.
    """

    def __init__(
        self,
        client: MailboxClient,
        state: ViewerState,
        refresh: Callable[[], Awaitable[None]],
    ):
        self.client = client
        self.state = state
        self.refresh = refresh

    @async_log_call
    async def run(self, confirmed: bool) -> bool:
        if not confirmed:
            logger.debug("Clear all declined")
            return False

        try:
            await self.client.clear_messages()
        except CatchViewError as e:
            ErrorHandler.handle(e, "Error clearing emails", log_traceback=False)
            return False

        self.state.reset()
        log_event("clear", "Cleared all emails")
        await self.refresh()
        return True
