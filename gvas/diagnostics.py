"""
Non-fatal decode diagnostics.

A Diagnostics instance is created per decode and passed down explicitly,
so concurrent decodes never share state.
"""

import logging
from typing import List, Optional


class Diagnostics:
    """Collects warnings raised while decoding and forwards them to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("gvas")
        self.messages: List[str] = []

    def warning(self, msg: str, *args):
        text = msg % args if args else msg
        self.messages.append(text)
        self.logger.warning(text)

    def debug(self, msg: str, *args):
        self.logger.debug(msg, *args)

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)
