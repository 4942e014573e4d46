"""Small pure helpers without I/O."""

from flashdeck.utils.text import clean_title, is_valid_search_query
from flashdeck.utils.validation import (
    parse_deck_id,
    parse_flashcard_id,
    require_user_id,
    validate_limit,
    validate_order_by,
)

__all__ = [
    "clean_title",
    "is_valid_search_query",
    "parse_deck_id",
    "parse_flashcard_id",
    "require_user_id",
    "validate_limit",
    "validate_order_by",
]
