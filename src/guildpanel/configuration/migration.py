"""
Declarative key migrations for old ``config.yml`` layouts.

Each :class:`MigrationRule` applies to files whose schema version is strictly
below ``before_version``. Rules run in table order over every flattened key;
a rule either rewrites the key or drops the entry by returning ``None``.
Adding a future migration means appending a rule, not editing a loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

from guildpanel.configuration.document import FlatDocument, in_namespace, is_section
from guildpanel.configuration.version import compare_version

# Namespace owned by the fresh file (version, creation); never replayed
RESERVED_NAMESPACE = "config"


@dataclass(frozen=True)
class MigrationRule:
    """One key rewrite.

    Attributes:
        name: Short label used in log output.
        before_version: The rule applies when migrating from a version
            strictly older than this.
        applies: Predicate on the dotted key.
        transform: Returns the new key, or ``None`` to drop the entry.
    """

    name: str
    before_version: str
    applies: Callable[[str], bool]
    transform: Callable[[str], Optional[str]]

    def active_for(self, source_version: str) -> bool:
        return compare_version(self.before_version, source_version)


def _replace_prefix(old: str, new: str) -> Callable[[str], str]:
    return lambda key: new + key[len(old):]


def _replace_suffix(old: str, new: str) -> Callable[[str], str]:
    return lambda key: key[: -len(old)] + new


MIGRATION_RULES: Tuple[MigrationRule, ...] = (
    MigrationRule(
        name="drop-raygun",
        before_version="3.0.6",
        applies=lambda key: in_namespace(key, "raygun"),
        transform=lambda key: None,
    ),
    MigrationRule(
        name="mysql-to-hikari",
        before_version="3.0.6",
        applies=lambda key: in_namespace(key, "mysql"),
        transform=_replace_prefix("mysql", "hikari.sql"),
    ),
    MigrationRule(
        name="discord-rel-to-release",
        before_version="3.0.6",
        applies=lambda key: in_namespace(key, "discord") and key.endswith("rel"),
        transform=_replace_suffix("rel", "release"),
    ),
)


def migrate_key(
    key: str, source_version: str, rules: Iterable[MigrationRule] = MIGRATION_RULES
) -> Optional[str]:
    """Run ``key`` through every active rule; ``None`` means drop it."""
    current: Optional[str] = key
    for rule in rules:
        if current is None:
            break
        if rule.active_for(source_version) and rule.applies(current):
            current = rule.transform(current)
    return current


def plan_replay(
    snapshot: FlatDocument,
    source_version: str,
    rules: Iterable[MigrationRule] = MIGRATION_RULES,
) -> List[Tuple[str, Any]]:
    """Return the ``(key, value)`` pairs to write onto a fresh document.

    Reserved ``config.*`` keys and section placeholders are skipped; every
    other entry is kept, possibly under a rewritten key.
    """
    rules = tuple(rules)
    replay: List[Tuple[str, Any]] = []
    for key, value in snapshot:
        if in_namespace(key, RESERVED_NAMESPACE) or is_section(value):
            continue
        new_key = migrate_key(key, source_version, rules)
        if new_key is not None:
            replay.append((new_key, value))
    return replay
