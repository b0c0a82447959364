from __future__ import annotations

from typing import Any


def build_large_context() -> dict[str, Any]:
    """Large context: 1000 rows rendered through an included partial."""
    return {
        "title": "Inventory",
        "rows": [
            {"id": i, "name": f"Item <{i}>", "stock": i % 7}
            for i in range(1000)
        ],
    }


LARGE_CONTEXT = build_large_context()
