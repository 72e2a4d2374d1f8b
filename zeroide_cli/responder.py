"""Assistant response generators.

The session only depends on the ResponseGenerator contract: an async callable
taking the submitted text and returning the reply. EchoResponder is the
built-in stand-in until a real inference backend is plugged in.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

ResponseGenerator = Callable[[str], Awaitable[str]]

DEFAULT_RESPONSE_DELAY = 2.0


@dataclass
class EchoResponder:
    """Reply with an acknowledgement of the user's text after a fixed delay."""

    delay: float = DEFAULT_RESPONSE_DELAY

    async def __call__(self, text: str) -> str:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return f'I understand you\'re asking about "{text}". Let me help you with that.'
