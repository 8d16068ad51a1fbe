"""
Score one completed questionnaire from the command line.

USAGE:
    python -m riskprofile answers.json [--catalog PATH] [--allocations PATH] [--config PATH]

answers.json maps question id -> chosen option value, e.g.
    {"q1_emergency_fund": 4, "q2_income_stability": 3, ...}

Prints the RiskProfileResult as JSON. Exit status 2 when the answers file is
unreadable or answers are missing, 3 on a catalog/allocation/config defect.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .allocation import load_allocation_table
from .catalog import load_catalog
from .classifier import ScoringPolicy
from .errors import MissingAnswer, RiskProfileError
from .profile import compute_risk_profile
from .utils import ENV_DEBUG, env_flag, load_config, load_logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="riskprofile",
        description="Compute an investor risk profile from questionnaire answers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("answers", help="Path to answers JSON (question id -> value)")
    parser.add_argument("--catalog", default=None, help="Question catalog YAML (default: config/questions.yaml)")
    parser.add_argument("--allocations", default=None, help="Allocation table YAML (default: config/allocations.yaml)")
    parser.add_argument("--config", default=None, help="config.yaml with the scoring policy")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def read_answers(path):
    """Answers JSON as a dict; raises ValueError with a user-facing message."""
    p = Path(path)
    try:
        with open(p, "r") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ValueError(f"answers file not found: {p}") from None
    except json.JSONDecodeError as e:
        raise ValueError(f"{p} is not valid JSON ({e.msg}, line {e.lineno})") from e
    if not isinstance(data, dict):
        raise ValueError(f"{p} must contain a JSON object of question id -> value")
    return data


def main(argv=None) -> int:
    args = parse_args(argv)
    log = load_logger()
    if args.verbose or env_flag(ENV_DEBUG):
        log.setLevel(logging.DEBUG)

    try:
        catalog = load_catalog(args.catalog)
        allocations = load_allocation_table(args.allocations)
        policy = ScoringPolicy.from_config(load_config(args.config))
    except (RiskProfileError, FileNotFoundError, ValueError) as e:
        log.error(f"Configuration error: {e}")
        return 3

    try:
        answers = read_answers(args.answers)
    except ValueError as e:
        print(f"Cannot read answers: {e}", file=sys.stderr)
        return 2

    try:
        result = compute_risk_profile(catalog, answers, policy=policy, allocations=allocations)
    except MissingAnswer as e:
        print(f"Please complete all questions (missing: {e.question_id})", file=sys.stderr)
        return 2
    except RiskProfileError as e:
        log.error(f"Configuration error: {e}")
        return 3

    print(json.dumps(result.to_dict(), indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
