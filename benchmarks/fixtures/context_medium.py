from __future__ import annotations

from typing import Any


def build_medium_context() -> dict[str, Any]:
    """Medium context: 100 items with prices and a handful of scalars."""
    context: dict[str, Any] = {
        "title": "Catalog",
        "items": [{"id": i, "name": f"Item {i}", "price": i * 1.5} for i in range(100)],
        "categories": [f"Category {i}" for i in range(10)],
    }
    for i in range(20):
        context[f"var_{i}"] = f"value_{i}"
    return context


MEDIUM_CONTEXT = build_medium_context()
