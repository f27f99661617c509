from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Static

from catchview.core.api_client import MailboxClient
from catchview.utils.config import AppConfig
from catchview.utils.logging import get_logger
from .layout.message_list import (
    InboxEmpty,
    ListRefreshed,
    ListRefreshFailed,
    MessageList,
    MessageSelected,
)
from .message_actions import CLEAR_CONFIRMATION, ClearAction, MessageAction, MessageActions
from .state import ViewerState
from .widgets.hint_bar import HintBar
from .widgets.message_viewer import NO_CONTENT_PLACEHOLDER, MessageViewer
from .widgets.modals.confirm_modal import ConfirmModal
from .widgets.status_bar import StatusBar

logger = get_logger(__name__)


class CatchViewApp(App):
    CSS_PATH = "styles.tcss"
    TITLE = "catchview - Captured Mail Viewer"

    BINDINGS = [
        Binding("r", "refresh", "Refresh"),
        Binding("c", "clear_all", "Clear all"),
        Binding("j", "select_next", "Next", show=False),
        Binding("k", "select_previous", "Previous", show=False),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, config: AppConfig, client: Optional[MailboxClient] = None):
        super().__init__()
        self.config = config
        self._owns_client = client is None
        self.client = client or MailboxClient(
            config.server.base_url, timeout=config.server.timeout
        )
        self.state = ViewerState()
        self.message_list = MessageList(self.client, self.state)
        self.message_viewer = MessageViewer(self.client)
        self.status_bar = StatusBar(self.client.base_url)
        self.clear_action = ClearAction(self.client, self.state, self.message_list.refresh_list)

    def compose(self) -> ComposeResult:
        yield Horizontal(
            Vertical(
                Static("Inbox", classes="section-title"),
                self.message_list,
                MessageActions(),
                id="list-pane",
            ),
            self.message_viewer,
        )
        yield self.status_bar
        yield HintBar()

    # --- Lifecycle ---
    def on_mount(self) -> None:
        interval = self.config.viewer.poll_interval
        logger.info(f"Watching {self.client.base_url} every {interval}s")
        self.message_list.start_polling(interval)

    async def on_unmount(self) -> None:
        if self._owns_client:
            await self.client.close()

    # --- Actions ---
    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        # List bindings are inert while the confirmation prompt is open
        if isinstance(self.screen, ConfirmModal) and action in (
            "clear_all", "select_next", "select_previous",
        ):
            return False
        return True

    def action_refresh(self) -> None:
        self.message_list.request_refresh()

    def action_clear_all(self) -> None:
        self.push_screen(ConfirmModal(CLEAR_CONFIRMATION), callback=self._on_clear_answered)

    def _on_clear_answered(self, confirmed: Optional[bool]) -> None:
        self.run_worker(self.clear_action.run(bool(confirmed)), group="clear")

    def action_select_next(self) -> None:
        self.message_list.select_offset(1)

    def action_select_previous(self) -> None:
        self.message_list.select_offset(-1)

    # --- Event Handlers ---
    def on_message_selected(self, event: MessageSelected) -> None:
        self.run_worker(self.message_viewer.show(event.message_id), group="content")

    def on_inbox_empty(self, _: InboxEmpty) -> None:
        self.message_viewer.show_placeholder(NO_CONTENT_PLACEHOLDER)

    def on_list_refreshed(self, event: ListRefreshed) -> None:
        self.status_bar.mark_refreshed(event.count)

    def on_list_refresh_failed(self, event: ListRefreshFailed) -> None:
        self.status_bar.mark_failed(event.error)

    def on_message_action(self, event: MessageAction) -> None:
        match event.action_name:
            case "refresh":
                self.action_refresh()
            case "clear":
                self.action_clear_all()
