import re
from typing import Optional

from bs4 import BeautifulSoup, NavigableString
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from catchview.core.api_client import MailboxClient
from catchview.core.models import MessageDetail, format_timestamp
from catchview.utils.errors import CatchViewError, ErrorHandler
from catchview.utils.logging import async_log_call, get_logger

logger = get_logger(__name__)

NO_CONTENT_PLACEHOLDER = "No emails to display"
NO_SELECTION_PLACEHOLDER = "No message selected."
CONTENT_ERROR_PLACEHOLDER = "Error loading email content"
RECIPIENT_SEPARATOR = ", "

BLOCK_TAGS = [
    "p", "div", "li", "tr", "table", "ul", "ol", "blockquote", "pre", "hr",
    "h1", "h2", "h3", "h4", "h5", "h6",
]


def format_header(detail: MessageDetail) -> Text:
    """Subject, sender, recipients and date of a message."""
    header = Text()
    header.append(detail.display_subject, style="bold")
    header.append("\n")
    for label, value in (
        ("From", detail.sender),
        ("To", RECIPIENT_SEPARATOR.join(detail.recipients)),
        ("Date", format_timestamp(detail.received_at)),
    ):
        header.append(f"{label}: ", style="bold")
        header.append(value)
        header.append("\n")
    header.rstrip()
    return header


def html_to_text(markup: str) -> str:
    """Lay out an HTML body as terminal text.

    The markup is trusted as-is: the backend is responsible for sanitizing it,
    nothing here filters or escapes it.
    """
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()

    # Source whitespace carries no layout in HTML, only tags do
    for string in soup.find_all(string=lambda s: type(s) is NavigableString):
        string.replace_with(re.sub(r"\s+", " ", string))

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")
    for cell in soup.find_all(["td", "th"]):
        cell.insert_after(" ")

    # One line per block; boundaries of nested blocks would otherwise stack up
    lines = (line.strip() for line in soup.get_text("").splitlines())
    return "\n".join(line for line in lines if line)


def render_body(detail: MessageDetail) -> Text:
    """Body block: HTML laid out as text, anything else shown literally."""
    if detail.is_html:
        return Text(html_to_text(detail.body))
    # Text() never interprets markup, so plain bodies stay verbatim
    return Text(detail.body)


class MessageViewer(VerticalScroll):
    """Displays full content of the selected message.

    Each show() call is numbered. A response that arrives after a newer
    request was issued is dropped, so a slow fetch never overwrites the
    content of a later selection.
    """

    def __init__(self, client: MailboxClient):
        super().__init__(id="message-viewer")
        self.client = client
        self.current: Optional[MessageDetail] = None
        self.placeholder: Optional[str] = NO_SELECTION_PLACEHOLDER
        self.header_text = Text()
        self.body_text = Text()
        self._request_seq = 0

    def compose(self) -> ComposeResult:
        yield Static(NO_SELECTION_PLACEHOLDER, id="message-header", classes="placeholder")
        yield Static(id="message-body")

    def on_mount(self) -> None:
        self.query_one("#message-body", Static).display = False

    def _next_request(self) -> int:
        self._request_seq += 1
        return self._request_seq

    @async_log_call
    async def show(self, message_id: str) -> None:
        """Fetch a message and replace the content pane with it."""
        request = self._next_request()

        try:
            detail = await self.client.get_message(message_id)
        except CatchViewError as e:
            if request != self._request_seq:
                logger.debug(f"Dropping failed response for {message_id} (request {request})")
                return
            ErrorHandler.handle(e, CONTENT_ERROR_PLACEHOLDER, log_traceback=False)
            self._render_placeholder(CONTENT_ERROR_PLACEHOLDER)
            return

        if request != self._request_seq:
            logger.debug(f"Dropping stale response for {message_id} (request {request})")
            return

        self._render_message(detail)

    def show_placeholder(self, text: str) -> None:
        """Replace the content pane with a placeholder, superseding pending fetches."""
        self._next_request()
        self._render_placeholder(text)

    def _render_message(self, detail: MessageDetail) -> None:
        self.current = detail
        self.placeholder = None
        self.header_text = format_header(detail)
        self.body_text = render_body(detail)

        header = self.query_one("#message-header", Static)
        header.remove_class("placeholder")
        header.update(self.header_text)

        body = self.query_one("#message-body", Static)
        body.set_class(detail.is_html, "html")
        body.set_class(not detail.is_html, "preformatted")
        body.update(self.body_text)
        body.display = True

        self.scroll_home(animate=False)
        logger.debug(f"Displayed email {detail.id}")

    def _render_placeholder(self, text: str) -> None:
        self.current = None
        self.placeholder = text
        self.header_text = Text(text)
        self.body_text = Text()

        header = self.query_one("#message-header", Static)
        header.add_class("placeholder")
        header.update(self.header_text)

        body = self.query_one("#message-body", Static)
        body.update("")
        body.display = False
