import json
import os
import sys
from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass
class Dataset:
    headings: list
    rows: list


def _clean_value(value):
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (list, tuple, dict)):
        return value
    if value is None or value is pd.NaT or value is pd.NA:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, np.datetime64):
        return None if np.isnat(value) else pd.Timestamp(value)
    if isinstance(value, np.generic):
        return value.item()
    return value


def dataset_from_frame(df: pd.DataFrame) -> Dataset:
    headings = [str(col) for col in df.columns]
    rows = [
        [_clean_value(v) for v in record]
        for record in df.itertuples(index=False, name=None)
    ]
    return Dataset(headings, rows)


class FileTypeHandler:
    SUPPORTED = {".csv", ".json", ".parquet", ".xlsx"}

    def __init__(self, path: str):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

        if self.ext not in self.SUPPORTED:
            print("Unsupported file type (use .csv, .json, .parquet, or .xlsx)", file=sys.stderr)
            sys.exit(1)

    def load(self) -> Dataset:
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return Dataset([], [])

        if self.ext == ".csv":
            try:
                df = pd.read_csv(self.path)
            except pd.errors.EmptyDataError:
                return Dataset([], [])
            return dataset_from_frame(df)
        elif self.ext == ".json":
            return self._load_json()
        elif self.ext == ".parquet":
            self._ensure_parquet_engine()
            return dataset_from_frame(pd.read_parquet(self.path))
        elif self.ext == ".xlsx":
            self._ensure_excel_engine()
            return dataset_from_frame(pd.read_excel(self.path))

        print("Unsupported file type (use .csv, .json, .parquet, or .xlsx)", file=sys.stderr)
        sys.exit(1)

    def _load_json(self) -> Dataset:
        with open(self.path, "r", encoding="utf-8") as f:
            payload = json.load(f)

        # {"headings": [...], "data": [[...], ...]} keeps rich cells intact
        if isinstance(payload, dict) and "data" in payload:
            rows = [list(row) for row in payload.get("data") or []]
            headings = payload.get("headings")
            if headings is None:
                headings = [f"col_{i}" for i in range(len(rows[0]) if rows else 0)]
            return Dataset([str(h) for h in headings], rows)

        if isinstance(payload, list):
            if payload and all(isinstance(rec, dict) for rec in payload):
                headings: list = []
                for rec in payload:
                    for key in rec:
                        if key not in headings:
                            headings.append(key)
                rows = [[rec.get(h) for h in headings] for rec in payload]
                return Dataset([str(h) for h in headings], rows)
            return dataset_from_frame(pd.DataFrame(payload))

        print("Unsupported JSON layout (use a list of records or {headings, data})", file=sys.stderr)
        sys.exit(1)

    def _ensure_parquet_engine(self):
        try:
            import pyarrow  # noqa: F401

            return
        except ImportError:
            pass
        print("Parquet support requires pyarrow. Install via: pip install pyarrow", file=sys.stderr)
        sys.exit(1)

    def _ensure_excel_engine(self):
        try:
            import openpyxl  # noqa: F401

            return
        except ImportError:
            pass
        print("XLSX support requires openpyxl. Install via: pip install openpyxl", file=sys.stderr)
        sys.exit(1)


def write_blob(data: bytes, filename: str) -> None:
    with open(filename, "wb") as f:
        f.write(data)
