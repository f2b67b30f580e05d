from __future__ import annotations

import json
from typing import Dict, List, Protocol

ProductUrls = Dict[str, List[str]]  # domain -> product URLs


class Exporter(Protocol):
    def export(self, data: ProductUrls, path: str) -> None:
        ...


def render_json(data: ProductUrls) -> str:
    """Pretty-printed JSON shared by stdout output and the JSON exporter."""
    return json.dumps(data, indent=2, ensure_ascii=False)
