from __future__ import annotations

from pathlib import Path

from .base import ProductUrls, render_json


class JSONExporter:
    def export(self, data: ProductUrls, path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(render_json(data))
            f.write("\n")
