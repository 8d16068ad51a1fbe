#!/usr/bin/env python3
"""
Policy Sensitivity Runner - category mix across capacity-slack values.

USAGE:
    python3 dev/run_policy_sensitivity.py --slacks 0.0,0.25,0.5,0.75,1.0 --n 2000

Scores the same seeded random answer sets under each slack value and writes
one row per (slack, category) with the share of investors in that category.
Run manually when product revisits the slack or band floors.

Args:
    --slacks: Comma-separated capacity slack values (default: 0.0,0.25,0.5,0.75,1.0)
    --n: Answer sets per run (default: 1000)
    --seed: Random seed (default: 42)
    --catalog: Question catalog YAML (default: config/questions.yaml)
    --out: Output CSV path (default: dev/artifacts/policy_sensitivity_<timestamp>.csv)
    --verbose: Enable verbose logging

Output CSV columns:
    slack, category, share, mean_final_score
"""

import sys
from pathlib import Path
from datetime import datetime
import argparse
import logging

# Add repo root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pandas as pd

from riskprofile.calibration import category_distribution, profile_frame, random_answer_sets
from riskprofile.catalog import load_catalog
from riskprofile.classifier import ScoringPolicy
from riskprofile.utils import get_logger


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Category mix across capacity-slack values",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("--slacks", type=str, default="0.0,0.25,0.5,0.75,1.0",
                        help="Comma-separated capacity slack values")
    parser.add_argument("--n", type=int, default=1000, help="Answer sets per run (default: 1000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--catalog", type=str, default=None, help="Question catalog YAML")
    parser.add_argument("--out", type=str, default=None, help="Output CSV path")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser.parse_args()


def main():
    args = parse_args()
    log = get_logger("riskprofile.dev")
    if not args.verbose:
        # one INFO line per profile is too chatty for thousands of runs
        logging.getLogger("riskprofile.profile").setLevel(logging.WARNING)

    catalog = load_catalog(args.catalog)
    answer_sets = random_answer_sets(catalog, args.n, seed=args.seed)
    slacks = [float(s) for s in args.slacks.split(",") if s.strip()]

    rows = []
    for slack in slacks:
        frame = profile_frame(catalog, answer_sets, policy=ScoringPolicy(capacity_slack=slack))
        share = category_distribution(frame)
        means = frame.groupby("category")["final_score"].mean()
        for category, value in share.items():
            rows.append({
                "slack": slack,
                "category": category,
                "share": round(float(value), 4),
                "mean_final_score": round(float(means.get(category, float("nan"))), 3),
            })
        log.info(f"slack={slack:g}: " + ", ".join(f"{c}={v:.1%}" for c, v in share.items()))

    out = Path(args.out) if args.out else (
        ROOT / "dev" / "artifacts" / f"policy_sensitivity_{datetime.now():%Y%m%d_%H%M%S}.csv"
    )
    out.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows).to_csv(out, index=False)
    log.info(f"Wrote {len(rows)} rows to {out}")


if __name__ == "__main__":
    main()
