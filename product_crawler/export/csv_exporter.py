from __future__ import annotations

import csv
from pathlib import Path

from .base import ProductUrls


class CSVExporter:
    """
    Writes one row per product URL.
    """

    _headers = ["domain", "url"]

    def export(self, data: ProductUrls, path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            w = csv.writer(f)
            w.writerow(self._headers)
            for domain, urls in data.items():
                for url in urls:
                    w.writerow([domain, url])
