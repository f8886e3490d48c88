"""
Club categories: the predefined options shown in the admin form plus free-text extras.

Stored on the club as one comma-separated string, normalized by normalize_categories().
"""
from typing import Iterable, NamedTuple


class CategoryOption(NamedTuple):
    value: str
    label: str


CATEGORY_OPTIONS: list[CategoryOption] = [
    CategoryOption("fitness", "Fitness"),
    CategoryOption("kampfsport", "Kampfsport"),
    CategoryOption("teamsport", "Teamsport"),
    CategoryOption("yoga", "Yoga"),
    CategoryOption("tanz", "Tanz"),
    CategoryOption("outdoor", "Outdoor"),
    CategoryOption("schwimmen", "Schwimmen"),
    CategoryOption("gesundheit", "Gesundheit"),
]

_LABEL_BY_VALUE = {opt.value: opt.label for opt in CATEGORY_OPTIONS}


def split_categories(raw: str | None) -> list[str]:
    """Comma-split, trim, drop empties, dedupe case-insensitively keeping the first spelling."""
    seen: set[str] = set()
    items: list[str] = []
    for part in (raw or "").split(","):
        item = part.strip()
        if not item:
            continue
        key = item.lower()
        if key in seen:
            continue
        seen.add(key)
        items.append(item)
    return items


def normalize_categories(raw: str | None) -> str:
    return ", ".join(split_categories(raw))


def category_label_for_value(value: str) -> str:
    """Label of a predefined option ("yoga" -> "Yoga"); other values come back trimmed."""
    value = (value or "").strip()
    return _LABEL_BY_VALUE.get(value.lower(), value)


def categories_from_form(selected: Iterable[str], custom: str = "") -> str:
    labels = [category_label_for_value(v) for v in selected]
    labels = [label for label in labels if label]
    custom = (custom or "").strip()
    if custom:
        labels.append(custom)
    return normalize_categories(", ".join(labels))


def category_selection(categories: str | None) -> tuple[set[str], str]:
    """Split stored categories into (checked option values, remaining custom text) for the form."""
    selected: set[str] = set()
    custom: list[str] = []
    for item in split_categories(categories):
        lower = item.lower()
        if lower in _LABEL_BY_VALUE:
            selected.add(lower)
        else:
            custom.append(item)
    return selected, ", ".join(custom)
