import argparse
import json
import logging
import sys

import pandas as pd

from renalcalc.core.errors import RenalFunctionError
from renalcalc.core.state import EstimationConfig
from renalcalc.renal.engine import estimate_renal_function
from renalcalc.renal.methods import available_methods

PATIENT_KEYS = ("method", "sex", "age", "race", "weight", "height", "bsa",
                "preterm", "ckd", "scr", "scr_unit", "times", "relative")


def load_config(path):
    """Read a JSON file of patient covariates and EstimationConfig fields."""
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return data


def load_series(path):
    """Read creatinine observations (scr, optional scr_unit and time) from CSV."""
    df = pd.read_csv(path)
    if "scr" not in df.columns:
        raise ValueError(f"{path} has no 'scr' column")
    scr = df["scr"].astype(float).tolist()
    scr_unit = df["scr_unit"].astype(str).tolist() if "scr_unit" in df.columns else None
    times = df["time"].astype(float).tolist() if "time" in df.columns else None
    return scr, scr_unit, times


def build_arguments(args):
    """Merge config file, CSV input and command-line flags (flags win)."""
    data = load_config(args.config) if args.config else {}
    config = EstimationConfig.from_dict(data)
    kwargs = {k: data[k] for k in PATIENT_KEYS if k in data}

    if args.input:
        kwargs["scr"], unit_col, times = load_series(args.input)
        if unit_col is not None:
            kwargs["scr_unit"] = unit_col
        if times is not None:
            kwargs["times"] = times

    for key in ("method", "sex", "age", "race", "weight", "height", "bsa",
                "scr", "scr_unit", "times", "relative"):
        value = getattr(args, key)
        if value is not None:
            kwargs[key] = value
    if args.preterm:
        kwargs["preterm"] = True
    if args.ckd:
        kwargs["ckd"] = True

    for key in ("unit_out", "bsa_method", "min_value", "max_value"):
        value = getattr(args, key)
        if value is not None:
            setattr(config, key, value)
    if args.quiet:
        config.verbose = False
    return kwargs, config


def write_output(path, scr, result):
    df = pd.DataFrame({
        "scr": scr,
        "value": result.values,
        "unit": result.unit,
        "weight_basis": result.weight_basis,
    })
    df.to_csv(path, index=False)


def run(args) -> int:
    try:
        kwargs, config = build_arguments(args)
        result = estimate_renal_function(config=config, **kwargs)
    except (RenalFunctionError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.output:
        write_output(args.output, kwargs.get("scr"), result)
        print(f"Saved {len(result.values)} values to {args.output}")
    else:
        for value in result.values:
            print(f"{value:.2f} {result.unit}")
        print(f"Weight basis: {result.weight_basis}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description="Estimate renal function (eGFR / CrCl) from serum creatinine")
    parser.add_argument("--method", type=str, help=f"Equation: {', '.join(available_methods())}")
    parser.add_argument("--sex", type=str.lower, choices=["male", "female", "m", "f"])
    parser.add_argument("--age", type=float, help="Age in years")
    parser.add_argument("--scr", type=float, nargs="+", help="Serum creatinine value(s)")
    parser.add_argument("--scr-unit", type=str, help="mg/dL (default) or umol/L")
    parser.add_argument("--race", type=str.lower, choices=["black", "other"])
    parser.add_argument("--weight", type=float, help="Weight in kg")
    parser.add_argument("--height", type=float, help="Height in cm")
    parser.add_argument("--bsa", type=float, help="Body surface area in m^2")
    parser.add_argument("--bsa-method", type=str, help="BSA equation (default: dubois)")
    parser.add_argument("--preterm", action="store_true", help="Preterm birth (Schwartz)")
    parser.add_argument("--ckd", action="store_true", help="Chronic kidney disease")
    parser.add_argument("--times", type=float, nargs="+", help="Sample times in days")
    basis = parser.add_mutually_exclusive_group()
    basis.add_argument("--relative", dest="relative", action="store_const", const=True,
                       help="Report per 1.73 m^2")
    basis.add_argument("--absolute", dest="relative", action="store_const", const=False,
                       help="Report absolute values")
    parser.add_argument("--unit-out", type=str, help="mL/min (default), L/hr or mL/hr")
    parser.add_argument("--min-value", type=float, help="Lower clamp for reported values")
    parser.add_argument("--max-value", type=float, help="Upper clamp for reported values")
    parser.add_argument("--input", type=str, help="CSV with scr[, scr_unit, time] columns")
    parser.add_argument("--output", type=str, help="Write results to CSV")
    parser.add_argument("--config", type=str, help="Path to JSON configuration file")
    parser.add_argument("--quiet", action="store_true", help="Do not log advisories")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    sys.exit(run(args))


if __name__ == "__main__":
    main()
