import argparse
import json
import os
from typing import List, Optional

from tools.master_logger import MasterLogger

from .config import SweepConfig, apply_cli_overrides
from .env import collect_env
from .formats import available_formats
from .report import ReportWriter, summary_frame, write_artifacts
from .sweep import run_sweep

logger = MasterLogger


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Time and compare posit vs IEEE float matrix arithmetic against a float64 reference",
        epilog=f"Overrides: key=value pairs, e.g. repetitions=2 narrow=posit16 sizes=[8,16]. Formats: {', '.join(available_formats())}",
    )
    p.add_argument("-cfg", "--config", required=False, help="Path to YAML sweep config. If omitted, built-in defaults are used.")
    p.add_argument("-o", "--out", required=False, default=None, help="Directory for results.jsonl/results.csv/env.json (overrides outputs.root)")
    p.add_argument("--no-summary", action="store_true", help="Skip the summary table after the sweep")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args, overrides = build_parser().parse_known_args(argv)

    cfg = SweepConfig.from_yaml(args.config) if args.config else SweepConfig()
    cfg = apply_cli_overrides(cfg, overrides)
    if args.out:
        cfg.outputs.root = args.out
    if args.no_summary:
        cfg.outputs.summary_table = False

    if cfg.outputs.root:
        logger.add_file_handler(os.path.join(cfg.outputs.root, "run.log"))

    env = collect_env()
    logger.info(env["vectorization"])
    logger.debug("Environment:\n" + json.dumps(env, indent=2, sort_keys=True))
    logger.info("Sweep config:\n" + json.dumps(cfg.to_dict(), indent=2, sort_keys=True))

    writer = ReportWriter()
    records = run_sweep(cfg, writer=writer)

    aborted = sum(1 for r in records if r.aborted)
    if aborted:
        logger.warning(f"{aborted} of {len(records)} case(s) aborted on non-finite values")
    if cfg.outputs.summary_table:
        writer.write_text("\nSummary:\n" + summary_frame(records).to_string(index=False))
    if cfg.outputs.root:
        paths = write_artifacts(cfg.outputs.root, records, env, cfg.to_dict())
        logger.info(f"Wrote {paths['results_jsonl']} and {paths['results_csv']}")
    return 0
