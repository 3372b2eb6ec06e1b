"""In-memory repositories for events and categories."""

from __future__ import annotations

from evently.domain.models import Category, Event


class EventRepository:
    """Dict-backed store for Event instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Event] = {}

    def add(self, event: Event) -> None:
        self._store[event.id] = event

    def get(self, event_id: str) -> Event | None:
        return self._store.get(event_id)

    def list_all(self) -> list[Event]:
        return list(self._store.values())

    def search(
        self,
        query: str = "",
        category_name: str = "",
        category_id: str = "",
        exclude_id: str | None = None,
    ) -> list[Event]:
        """Return matching events, newest first.

        ``query`` is a case-insensitive substring of the title; the category
        filters match exactly (name case-insensitively).
        """
        needle = query.strip().lower()
        wanted = category_name.strip().lower()
        matches = [
            e
            for e in self._store.values()
            if (not needle or needle in e.title.lower())
            and (not wanted or e.category.name.lower() == wanted)
            and (not category_id or e.category.id == category_id)
            and e.id != exclude_id
        ]
        return sorted(matches, key=lambda e: e.created_at, reverse=True)

    def delete(self, event_id: str) -> None:
        self._store.pop(event_id, None)


class CategoryRepository:
    """Dict-backed store for Category instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Category] = {}

    def add(self, category: Category) -> None:
        self._store[category.id] = category

    def get(self, category_id: str) -> Category | None:
        return self._store.get(category_id)

    def get_by_name(self, name: str) -> Category | None:
        wanted = name.strip().lower()
        for category in self._store.values():
            if category.name.lower() == wanted:
                return category
        return None

    def list_all(self) -> list[Category]:
        return sorted(self._store.values(), key=lambda c: c.name.lower())


# ---------------------------------------------------------------------------
# Seed data: the categories offered by the form's dropdown out of the box
# ---------------------------------------------------------------------------

DEFAULT_CATEGORIES = ("Music", "Tech", "Sports", "Art", "Food")


def seed_categories(repo: CategoryRepository) -> None:
    for name in DEFAULT_CATEGORIES:
        if repo.get_by_name(name) is None:
            repo.add(Category(name=name))
