# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Category registry mapping category names to appenders and levels.

Category names are hierarchical: ``app.db.pool`` (or ``app/db/pool``) falls
back to ``app.db`` and then ``app`` when it has no appenders of its own,
and finally to the registry-wide defaults.

The registry state is an immutable snapshot. Writers build a new snapshot
under a lock and swap it in; readers only dereference the current snapshot,
so resolution never blocks and an event resolved before a reconfiguration
keeps the appender tuple it was given.
"""

import logging
import re
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from .appender import Appender
from .levels import Level

logger = logging.getLogger(__name__)

_SEPARATOR = re.compile(r"[./]")


@dataclass(frozen=True)
class Category:
    """Registry entry for one category.

    Attributes:
        name: Category name
        appenders: Appenders attached directly to this category, in delivery order
        level: Threshold set directly on this category, or None to inherit
    """
    name: str
    appenders: tuple[Appender, ...] = ()
    level: Level | None = None


@dataclass(frozen=True)
class _Snapshot:
    categories: Mapping[str, Category]
    default_appenders: tuple[Appender, ...]
    default_level: Level


def parent_category(name: str) -> str | None:
    """Return the parent of a category name, or None for a top-level name.

    Example:
        >>> parent_category("app.db/pool")
        'app.db'
    """
    positions = [m.start() for m in _SEPARATOR.finditer(name)]
    if not positions:
        return None
    return name[:positions[-1]]


def _ancestry(name: str) -> Iterable[str]:
    current: str | None = name
    while current:
        yield current
        current = parent_category(current)


class CategoryRegistry:
    """Process-wide mapping from category name to appenders and level."""

    def __init__(self, default_level: Level | str = Level.TRACE):
        self._write_lock = threading.Lock()
        self._initial_level = Level.parse(default_level)
        self._snapshot = _Snapshot(
            categories=MappingProxyType({}),
            default_appenders=(),
            default_level=self._initial_level,
        )

    def _update(self, categories: dict[str, Category] | None = None, **changes) -> None:
        # Caller holds _write_lock.
        snapshot = self._snapshot
        if categories is not None:
            changes["categories"] = MappingProxyType(categories)
        self._snapshot = replace(snapshot, **changes)

    def _entry(self, name: str) -> Category:
        return self._snapshot.categories.get(name) or Category(name=name)

    def register(
        self,
        category: str,
        appenders: Iterable[Appender],
        level: Level | str | None = None,
    ) -> None:
        """Replace the appenders (and optionally the level) of a category.

        Args:
            category: Category name
            appenders: Appenders in delivery order; empty to inherit
            level: Optional threshold for the category
        """
        appender_tuple = tuple(appenders)
        parsed = Level.parse(level) if level is not None else None
        with self._write_lock:
            categories = dict(self._snapshot.categories)
            existing = categories.get(category) or Category(name=category)
            categories[category] = Category(
                name=category,
                appenders=appender_tuple,
                level=parsed if parsed is not None else existing.level,
            )
            self._update(categories)
        logger.debug(f"Registered category {category} with {len(appender_tuple)} appender(s)")

    def add_appender(self, category: str, appender: Appender) -> None:
        """Append an appender to a category's list."""
        with self._write_lock:
            categories = dict(self._snapshot.categories)
            existing = categories.get(category) or Category(name=category)
            categories[category] = replace(existing, appenders=existing.appenders + (appender,))
            self._update(categories)

    def remove_appender(self, category: str, appender: Appender) -> bool:
        """Detach an appender from a category.

        Returns:
            True if the appender was attached and has been removed
        """
        with self._write_lock:
            existing = self._snapshot.categories.get(category)
            if existing is None or appender not in existing.appenders:
                return False
            categories = dict(self._snapshot.categories)
            categories[category] = replace(
                existing,
                appenders=tuple(a for a in existing.appenders if a is not appender),
            )
            self._update(categories)
        return True

    def set_level(self, category: str, level: Level | str | None) -> None:
        """Set (or with None, clear) the threshold of a category."""
        parsed = Level.parse(level) if level is not None else None
        with self._write_lock:
            categories = dict(self._snapshot.categories)
            categories[category] = replace(self._entry(category), level=parsed)
            self._update(categories)

    def set_default_appenders(self, appenders: Iterable[Appender]) -> None:
        """Set the appenders used when no category in a chain has any."""
        appender_tuple = tuple(appenders)
        with self._write_lock:
            self._update(default_appenders=appender_tuple)

    def add_default_appender(self, appender: Appender) -> None:
        """Append an appender to the default list."""
        with self._write_lock:
            self._update(default_appenders=self._snapshot.default_appenders + (appender,))

    def set_default_level(self, level: Level | str) -> None:
        """Set the threshold used when no category in a chain has one."""
        parsed = Level.parse(level)
        with self._write_lock:
            self._update(default_level=parsed)

    def replace(
        self,
        categories: Iterable[Category],
        default_appenders: Iterable[Appender] = (),
        default_level: Level | str | None = None,
    ) -> list[Appender]:
        """Swap in a complete new configuration in one step.

        Readers see either the previous snapshot or the new one, never an
        empty or partial registry.

        Args:
            categories: Every category entry of the new configuration
            default_appenders: New default appender list
            default_level: New default threshold (None for the initial level)

        Returns:
            Appenders referenced before the swap and no longer referenced after it
        """
        entries = {entry.name: entry for entry in categories}
        snapshot = _Snapshot(
            categories=MappingProxyType(entries),
            default_appenders=tuple(default_appenders),
            default_level=Level.parse(default_level) if default_level is not None else self._initial_level,
        )
        with self._write_lock:
            previous = self.appenders()
            self._snapshot = snapshot
            current = self.appenders()
        return [a for a in previous if all(a is not c for c in current)]

    def resolve(self, category: str) -> tuple[Appender, ...]:
        """Return the effective appenders of a category.

        Walks the category's ancestry to the first non-empty appender list,
        then falls back to the default appenders. An empty tuple means the
        category is a no-op.
        """
        snapshot = self._snapshot
        for name in _ancestry(category):
            entry = snapshot.categories.get(name)
            if entry is not None and entry.appenders:
                return entry.appenders
        return snapshot.default_appenders

    def resolve_level(self, category: str) -> Level:
        """Return the effective threshold of a category."""
        snapshot = self._snapshot
        for name in _ancestry(category):
            entry = snapshot.categories.get(name)
            if entry is not None and entry.level is not None:
                return entry.level
        return snapshot.default_level

    def categories(self) -> dict[str, Category]:
        """Return a copy of the registered categories."""
        return dict(self._snapshot.categories)

    def appenders(self) -> list[Appender]:
        """Return every distinct appender referenced by the registry."""
        snapshot = self._snapshot
        seen: list[Appender] = []
        for appender in snapshot.default_appenders:
            if all(appender is not s for s in seen):
                seen.append(appender)
        for entry in snapshot.categories.values():
            for appender in entry.appenders:
                if all(appender is not s for s in seen):
                    seen.append(appender)
        return seen

    def clear(self) -> list[Appender]:
        """Remove every registration and reset the defaults.

        Returns:
            Appenders that were registered before the clear
        """
        return self.replace(())
