"""
Command line entry point for the power sweep
"""

import sys
from typing import List, Optional

from .utils import parse_args, build_config
from ..data.io_utils import save_sweep_results
from ..pipelines.power import PowerSweepPipeline
from ..visualization.power_curves import save_power_report


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    verbose = not args.quiet

    try:
        config = build_config(args)
        pipeline = PowerSweepPipeline(config, verbose=verbose)
        pipeline.load_data(args.roster, args.structure)
        results = pipeline.run(stream=sys.stdout, progress=args.progress)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        path = save_sweep_results(results.to_dataframe(), args.output)
        pipeline.log(f"Saved results: {path}")

    if args.summary:
        files_created = save_power_report(
            results,
            args.summary,
            min_hits=config.min_hits,
            save_plot=not args.no_plot,
        )
        for path in files_created.values():
            pipeline.log(f"Saved {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
