from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .errors import SampleSizeError
from .power import calculate_power, calculate_sample_size
from .utils import results_to_records


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="coxsize",
        description="Sample size for a binary covariate in Cox regression "
                    "with competing risks and a correlated covariate.",
    )
    ap.add_argument("--mode", choices=["size", "power"], default="size",
                    help="size: required events/subjects; power: power for a given --n")
    ap.add_argument("--theta", type=float, nargs="+", required=True, help="Hazard ratio(s)")
    ap.add_argument("--psi", type=float, nargs="+", required=True,
                    help="Proportion(s) experiencing the event of interest")
    ap.add_argument("--power", type=float, nargs="+", default=None,
                    help="Target power(s), default 0.8 (--mode size only)")
    ap.add_argument("--p", type=float, nargs="+", default=[0.5],
                    help="Proportion(s) with covariate value 1")
    ap.add_argument("--rho2", type=float, nargs="+", default=[0.0],
                    help="Squared correlation with the adjustment covariate")
    ap.add_argument("--alpha", type=float, nargs="+", default=[0.05], help="Two-sided alpha")
    ap.add_argument("--n", type=float, nargs="+", default=None,
                    help="Total sample size(s), required for --mode power")
    ap.add_argument("--allow-degenerate", action="store_true",
                    help="Allow theta=1 (reported as an infinite size) instead of failing")
    ap.add_argument("--nonfinite", choices=["flag", "drop"], default=None,
                    help="Keep (default) or drop scenarios whose size is not a finite count (--mode size only)")
    ap.add_argument("--out-csv", type=str, default=None, help="Write the table to this CSV")
    ap.add_argument("--out-json", type=str, default=None, help="Write a JSON report to this path")
    return ap


def run(args: argparse.Namespace) -> pd.DataFrame:
    if args.mode == "power":
        return calculate_power(
            n=args.n, theta=args.theta, p=args.p, psi=args.psi,
            rho2=args.rho2, alpha=args.alpha,
            allow_degenerate=args.allow_degenerate,
        )
    return calculate_sample_size(
        power=args.power if args.power is not None else 0.8,
        theta=args.theta, p=args.p, psi=args.psi,
        rho2=args.rho2, alpha=args.alpha,
        allow_degenerate=args.allow_degenerate, nonfinite=args.nonfinite or "flag",
    )


def main(argv: Optional[List[str]] = None) -> None:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.mode == "power" and args.n is None:
        ap.error("--n is required with --mode power")
    if args.mode == "power" and (args.power is not None or args.nonfinite is not None):
        ap.error("--power and --nonfinite apply to --mode size only")
    if args.mode == "size" and args.n is not None:
        ap.error("--n applies to --mode power only")

    try:
        table = run(args)
    except SampleSizeError as exc:
        ap.error(str(exc))

    print(table.to_string(index=False))

    if args.out_csv:
        out_csv = Path(args.out_csv)
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(out_csv, index=False)
        print(f"\nWrote table: {out_csv}")
    if args.out_json:
        inputs = {k: v for k, v in vars(args).items() if k not in ("out_csv", "out_json")}
        report = {"inputs": inputs, "results": results_to_records(table)}
        out_json = Path(args.out_json)
        out_json.parent.mkdir(parents=True, exist_ok=True)
        out_json.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"\nWrote report: {out_json}")


if __name__ == "__main__":
    main()
