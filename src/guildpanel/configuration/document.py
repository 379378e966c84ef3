"""
Dotted-path helpers over a nested YAML mapping.

A configuration document is a tree of dicts with scalar leaves. These helpers
address it with dotted keys (``hikari.sql.user``) and turn it into the
flattened ``(key, value)`` form used by migrations.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Tuple

_MISSING = object()

FlatDocument = List[Tuple[str, Any]]


def is_section(value: Any) -> bool:
    """Return True if ``value`` is a sub-section rather than a leaf."""
    return isinstance(value, dict)


def iter_paths(document: Dict[str, Any], deep: bool = True, prefix: str = "") -> Iterator[Tuple[str, Any]]:
    """Yield ``(dotted_key, value)`` for every entry in document order.

    Sections are yielded before their children, so a caller sees both the
    section itself and, when ``deep`` is set, everything below it.
    """
    for key, value in document.items():
        path = f"{prefix}{key}"
        yield path, value
        if deep and is_section(value):
            yield from iter_paths(value, deep=True, prefix=f"{path}.")


def flatten(document: Dict[str, Any]) -> FlatDocument:
    """Return the ordered list of ``(dotted_key, leaf_value)`` pairs."""
    return [(path, value) for path, value in iter_paths(document) if not is_section(value)]


def get_path(document: Dict[str, Any], key: str, default: Any = None) -> Any:
    node: Any = document
    for part in key.split("."):
        if not is_section(node):
            return default
        node = node.get(part, _MISSING)
        if node is _MISSING:
            return default
    return node


def set_path(document: Dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` to ``value``, creating or replacing intermediate sections.

    A scalar sitting where a section is needed is replaced by an empty
    section, matching how the YAML file would have to be rewritten anyway.
    """
    parts = key.split(".")
    node = document
    for part in parts[:-1]:
        child = node.get(part)
        if not is_section(child):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def in_namespace(key: str, namespace: str) -> bool:
    """Return True if ``key`` is ``namespace`` itself or lives below it."""
    return key == namespace or key.startswith(namespace + ".")
