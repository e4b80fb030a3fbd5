"""Import/export codecs: structured (JSON/YAML, lossless) and tabular (CSV, lossy)."""
from __future__ import annotations

from kanbanflow.codec.structured import BoardSerializer, export_json, import_json
from kanbanflow.codec.tabular import CSV_HEADER, export_csv, import_csv

__all__ = [
    "BoardSerializer",
    "export_json",
    "import_json",
    "CSV_HEADER",
    "export_csv",
    "import_csv",
]
