"""
Decoding of newline-delimited JSON response bodies, one line at a time.
"""
import json
import logging
from typing import Optional

from ollama_console.shared.errors import StreamParseError

logger = logging.getLogger(__name__)


class NDJSONDecoder:
    """
    Decodes the lines of one streamed body and counts the ones it had to drop.

    Line splitting is left to httpx (Response.aiter_lines). A line that is not
    valid JSON, or decodes to something other than an object, is logged and skipped.
    """

    def __init__(self):
        self.skipped = 0

    def decode(self, line: str) -> Optional[dict]:
        """Object carried by line, or None for blank and malformed lines."""
        try:
            return self.decode_line(line)
        except StreamParseError as e:
            self.skipped += 1
            logger.warning(f"Skipping stream line: {e}")
            return None

    @staticmethod
    def decode_line(line: str):
        """Decode a single line. Blank lines yield None."""
        line = line.strip()
        if not line:
            return None
        try:
            value = json.loads(line)
        except json.JSONDecodeError as e:
            raise StreamParseError(line, e.msg) from e
        if not isinstance(value, dict):
            raise StreamParseError(line, f"expected an object, got {type(value).__name__}")
        return value
