"""
Note Queries.

Listing helpers for the note collection held in memory. A locked note's
content never takes part in search; only its title does.
"""

from collections.abc import Iterable

from notemaster.schemas.note import ALL_CATEGORIES, Category, Note


def matches_search(note: Note, query: str) -> bool:
    """Case-insensitive match on title, and on content while the note is unlocked."""
    needle = query.casefold()
    if not needle:
        return True
    if needle in note.title.casefold():
        return True
    return not note.is_locked and needle in note.content.casefold()


def filter_notes(
    notes: Iterable[Note],
    category: Category | str | None = None,
    query: str = "",
) -> list[Note]:
    """
    Filter notes by category and search text, most recently updated first.

    Args:
        notes: Notes to filter
        category: Category to keep; None or ALL_CATEGORIES keeps every category
        query: Search text; empty matches everything
    """
    wanted = None if category in (None, ALL_CATEGORIES) else Category(category)
    selected = [
        note for note in notes
        if (wanted is None or note.category is wanted) and matches_search(note, query)
    ]
    return sorted(selected, key=lambda note: note.updated_at, reverse=True)


def count_by_category(notes: Iterable[Note]) -> dict[str, int]:
    """Count notes per category value, with the overall total under ALL_CATEGORIES."""
    counts: dict[str, int] = {ALL_CATEGORIES: 0}
    for note in notes:
        counts[ALL_CATEGORIES] += 1
        counts[note.category.value] = counts.get(note.category.value, 0) + 1
    return counts
