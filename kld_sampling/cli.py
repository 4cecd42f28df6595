import argparse
import logging
import sys

from pydantic import ValidationError

from config import settings
from kld_sampling.demo.runner import RoundParameters, run_gaussian_round, run_trials
from kld_sampling.stats.ztable import generate_table, write_table
from kld_sampling.utils.exceptions import KLDSamplingError

logger = logging.getLogger(__name__)

def build_parser():
    parser = argparse.ArgumentParser(
        prog="kld-sampling",
        description="Adequately sample a 1D Gaussian using KLD-sampling",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command")

    run = subparsers.add_parser("run", help="Sample until the KLD bound is met")
    defaults = settings.demo
    run.add_argument("--quantile", type=float, default=defaults.quantile, help="Confidence quantile in [0.5, 1]")
    run.add_argument("--error", type=float, default=defaults.kld_error, help="Maximum KL error (> 0)")
    run.add_argument("--bin-size", type=float, default=defaults.bin_size, help="Histogram bin width (> 0)")
    run.add_argument("--min-samples", type=int, default=defaults.min_samples, help="Minimum number of samples (>= 10)")
    run.add_argument("--underlying-mean", type=float, default=defaults.underlying_mean)
    run.add_argument("--underlying-var", type=float, default=defaults.underlying_var)
    run.add_argument("--seed", type=int, default=defaults.seed, help="Random seed, -1 for a time based one")
    run.add_argument("--trials", type=int, default=1, help="Number of rounds to run")

    table = subparsers.add_parser("build-table", help="Write a z-table resource")
    table.add_argument("path", nargs="?", default=str(settings.ztable_path))
    table.add_argument("--max-z", type=float, default=settings.ztable_max_z)
    return parser

def print_configuration(params: RoundParameters, seed: int):
    print()
    print(f"Source distribution: 1D Gaussian with mean={params.underlying_mean} and variance={params.underlying_var}")
    print(f"KLD quantile: {params.quantile}")
    print(f"KLD error: {params.kld_error}")
    print(f"KLD bin size: {params.bin_size}")
    print(f"Minimum # of samples: {params.min_samples}")
    print(f"Random Seed: {seed}")
    print()

def run_command(args) -> int:
    try:
        params = RoundParameters(
            quantile=args.quantile,
            kld_error=args.error,
            bin_size=args.bin_size,
            min_samples=args.min_samples,
            underlying_mean=args.underlying_mean,
            underlying_var=args.underlying_var,
            seed=args.seed,
        )
    except ValidationError as e:
        for error in e.errors():
            print(error["msg"])
        print("Please run with -h for runtime options.")
        return 2

    if args.trials > 1:
        trials = run_trials(params, args.trials)
        print_configuration(params, int(trials["seed"].iloc[0]))
        print(trials.to_string(index=False))
        print()
        print(trials[["num_samples", "mean", "variance"]].describe().to_string())
        return 0

    result = run_gaussian_round(params)
    print_configuration(params, result.seed)
    print(f"Final number of samples: {result.num_samples}")
    print(f"Final mean: {result.mean}")
    print(f"Final variance: {result.variance}")
    print()
    return 0

def build_table_command(args) -> int:
    values = generate_table(max_z=args.max_z)
    path = write_table(args.path, values)
    print(f"Wrote {len(values)} entries to {path}")
    return 0

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[%(levelname)s] %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 1
    try:
        if args.command == "build-table":
            return build_table_command(args)
        return run_command(args)
    except KLDSamplingError as e:
        logger.error("%s", e)
        print(f"kld-sampling: {e}", file=sys.stderr)
        return 1

if __name__ == "__main__":
    sys.exit(main())
