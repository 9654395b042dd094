from cardkeeper.parsers.decklist import (
    format_decklist,
    format_decklist_line,
    parse_decklist_line,
    tokenize_decklist,
)

__all__ = [
    "format_decklist",
    "format_decklist_line",
    "parse_decklist_line",
    "tokenize_decklist",
]
