from textual.widgets import Static


class HintBar(Static):
    """Displays keyboard shortcuts."""

    def __init__(self):
        super().__init__(
            "[b]R[/b] Refresh · [b]C[/b] Clear all · [b]J/K[/b] Next/Previous · [b]Ctrl+Q[/b] Quit",
            id="hint-bar",
        )
