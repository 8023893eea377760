"""Textual adapter: markup translation, host bridge and demo app."""

from .controller import TextualHost, TextualTablineAdapter, TextualUIHooks
from .markup import statusline_to_text, tokenize

__all__ = [
    "TextualHost",
    "TextualTablineAdapter",
    "TextualUIHooks",
    "statusline_to_text",
    "tokenize",
]
