"""catchview - terminal viewer for a captured-email inbox.

Polls a mail-catcher backend over its JSON API, lists the captured
messages, shows the selected one and can clear the whole inbox.
"""

__version__ = "0.1.0"
