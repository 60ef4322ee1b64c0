"""
Package classifier — description text → one human-facing category.

The policy is a data table, not code: an ordered tuple of categories,
each with an ordered tuple of lowercase keyword substrings.  The first
category with any keyword contained in the lower-cased description
wins, so table order decides ties.  The fallback category has no
keywords and is never matched directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True)
class Category:
    """A named bucket and the keywords that select it."""

    name: str
    keywords: tuple[str, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return not self.keywords


FALLBACK_CATEGORY = "Other"

CATEGORY_TABLE: tuple[Category, ...] = (
    Category("Monitoring & Diagnostics", (
        "monitor", "diagnostic", "system info", "performance", "stats", "log",
    )),
    Category("Image & Graphics", (
        "image", "graphics", "photo", "png", "jpeg", "svg", "webp", "gif",
        "editor", "convert image",
    )),
    Category("Video & Audio", (
        "video", "audio", "media", "ffmpeg", "stream", "record",
        "convert video", "player",
    )),
    Category("System Utilities", (
        "system", "utility", "tool", "manage", "optimize", "clean", "disk",
        "file", "clipboard", "launcher",
    )),
    Category("Development Tools", (
        "dev", "develop", "code", "compiler", "debugger", "git", "cli", "sdk",
        "api", "framework", "language", "build", "test",
    )),
    Category("Networking", (
        "network", "net", "proxy", "vpn", "dns", "http", "ssh", "ftp",
        "transfer", "download", "upload",
    )),
    Category("Text & Document", (
        "text", "document", "markdown", "pdf", "editor", "viewer", "parser",
    )),
    Category("Security", (
        "security", "encrypt", "decrypt", "password", "hash", "vpn",
    )),
    Category("Productivity", (
        "productivity", "task", "todo", "note", "calendar", "automation",
    )),
    Category("Databases", ("database", "sql", "nosql", "db", "client")),
    Category("Virtualization", ("virtual", "vm", "container", "docker", "kubernetes")),
    Category(FALLBACK_CATEGORY),
)


def fallback_name(table: Sequence[Category]) -> str:
    """Name of the table's fallback category."""
    for category in table:
        if category.is_fallback:
            return category.name
    return FALLBACK_CATEGORY


def classify(description: str | None, table: Sequence[Category] = CATEGORY_TABLE) -> str:
    """Assign exactly one category name to a description.

    Pure function of ``description`` and ``table``.
    """
    text = (description or "").lower()
    for category in table:
        if category.is_fallback:
            continue
        for keyword in category.keywords:
            if keyword in text:
                return category.name
    return fallback_name(table)


def build_table(entries: Iterable[tuple[str, Iterable[str]]]) -> tuple[Category, ...]:
    """Build a category table from ``(name, keywords)`` pairs.

    Keywords are lower-cased. Exactly one entry must have no keywords
    (the fallback) and it must come last.

    Raises:
        ValueError: if the table is empty or the fallback rule is broken.
    """
    table = tuple(
        Category(name, tuple(k.lower() for k in keywords if k))
        for name, keywords in entries
    )
    if not table:
        raise ValueError("Category table is empty")

    fallbacks = [c for c in table if c.is_fallback]
    if len(fallbacks) != 1:
        raise ValueError(
            f"Category table needs exactly one fallback (no keywords), found {len(fallbacks)}"
        )
    if not table[-1].is_fallback:
        raise ValueError(f"Fallback category {fallbacks[0].name!r} must be declared last")

    names = [c.name for c in table]
    if len(set(names)) != len(names):
        raise ValueError("Category names must be unique")
    return table
