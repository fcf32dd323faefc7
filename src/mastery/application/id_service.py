"""Service for generating stable flashcard IDs."""

from ulid import ULID


def generate_card_id() -> str:
    """Generate a stable, lexicographically time-ordered card ID using ULID."""
    return f"card_{ULID()}"
