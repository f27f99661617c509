from datetime import datetime
from typing import Optional

from textual.widgets import Static

from catchview.utils.errors import CatchViewError, format_error_message


class StatusBar(Static):
    """Backend URL, message count and the outcome of the last refresh."""

    def __init__(self, base_url: str):
        super().__init__(id="status-bar", markup=False)
        self.base_url = base_url
        self.count: Optional[int] = None
        self.last_refresh: Optional[datetime] = None
        self.last_error: Optional[str] = None

    def on_mount(self) -> None:
        self.update(self.status_text())

    def status_text(self) -> str:
        parts = [self.base_url]
        if self.last_error:
            parts.append(f"Refresh failed: {self.last_error}")
        elif self.last_refresh is not None:
            noun = "email" if self.count == 1 else "emails"
            parts.append(f"{self.count} {noun}")
            parts.append(f"updated {self.last_refresh.strftime('%X')}")
        else:
            parts.append("Connecting...")
        return " · ".join(parts)

    def mark_refreshed(self, count: int) -> None:
        self.count = count
        self.last_refresh = datetime.now()
        self.last_error = None
        self.update(self.status_text())

    def mark_failed(self, error: CatchViewError) -> None:
        self.last_error = format_error_message(error)
        self.update(self.status_text())
