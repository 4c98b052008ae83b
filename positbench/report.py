import os
import sys
from typing import Any, Dict, List, Optional, TextIO

import pandas as pd

from .harness import BenchmarkResult
from .io_utils import ensure_dir, write_csv, write_json, write_jsonl


def format_result(result: BenchmarkResult, label: Optional[str] = None) -> List[str]:
    title = f"Matrix Size: {result.shape}"
    if label:
        title += f" ({label})"
    return [
        f"\t--------{title}--------",
        f"\t {result.narrow} Time taken (us): {result.narrow_time_us:.3f}",
        f"\t {result.native} Time taken (us): {result.native_time_us:.3f}",
        f"\t {result.narrow} Mean Absolute Error: {result.narrow_mae:.6g}",
        f"\t {result.native} Mean Absolute Error: {result.native_mae:.6g}",
    ]


class ReportWriter:
    """Line-oriented text sink for benchmark results (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def write_result(self, result: BenchmarkResult, label: Optional[str] = None) -> None:
        for line in format_result(result, label):
            print(line, file=self.stream)
        self.stream.flush()

    def write_text(self, text: str) -> None:
        print(text, file=self.stream)
        self.stream.flush()


COLUMNS = [
    "rows", "cols", "regime", "a", "b", "narrow", "native",
    "narrow_time_us", "native_time_us", "narrow_mae", "native_mae", "aborted",
]


def record_rows(records) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for rec in records:
        r = rec.result
        rows.append({
            "rows": rec.rows,
            "cols": rec.cols,
            "regime": rec.regime.label,
            "a": rec.regime.a,
            "b": rec.regime.b,
            "narrow": rec.narrow,
            "native": rec.native,
            "narrow_time_us": r.narrow_time_us if r else float("nan"),
            "native_time_us": r.native_time_us if r else float("nan"),
            "narrow_mae": r.narrow_mae if r else float("nan"),
            "native_mae": r.native_mae if r else float("nan"),
            "aborted": r is None,
        })
    return rows


def summary_frame(records) -> pd.DataFrame:
    return pd.DataFrame(record_rows(records), columns=COLUMNS)


def write_artifacts(root: str, records, env: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, str]:
    ensure_dir(root)
    rows = record_rows(records)
    paths = {
        "results_jsonl": os.path.join(root, "results.jsonl"),
        "results_csv": os.path.join(root, "results.csv"),
        "env": os.path.join(root, "env.json"),
        "config": os.path.join(root, "config.json"),
    }
    write_jsonl(paths["results_jsonl"], rows)
    write_csv(paths["results_csv"], rows)
    write_json(paths["env"], env)
    write_json(paths["config"], config)
    return paths
