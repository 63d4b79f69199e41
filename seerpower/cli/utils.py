import argparse
from typing import List, Optional

from ..config import SweepConfig
from ..data.io_utils import STRUCTURE_FORMATS

# argparse destinations that map one-to-one onto SweepConfig fields
CONFIG_FIELDS = (
    'or_start', 'or_step', 'or_end',
    'samples_start', 'samples_step', 'samples_end',
    'repeats', 'maf', 'sampling_ratio',
    'feature_file', 'tool', 'extra_args', 'timeout',
    'n_jobs', 'seed', 'work_dir', 'structure_format', 'min_hits',
)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments for the power sweep"""
    parser = argparse.ArgumentParser(
        prog="seerpower",
        description="Estimate the power of an association tool by subsampling a population",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Required arguments
    parser.add_argument("roster",
                       help="Sample file: '<name> <0|1>' per line (element absent/present)")
    parser.add_argument("structure",
                       help="Population structure matrix, one row per sample (armadillo, npy, npz, hdf5 or text)")

    # Configuration
    parser.add_argument("--config", default=None,
                       help="JSON file with sweep settings; command line options override it")

    # Sweep grid (None means: keep the configured value)
    parser.add_argument("--or-start", type=float, default=None, help="First odds ratio")
    parser.add_argument("--or-step", type=float, default=None, help="Odds ratio step")
    parser.add_argument("--or-end", type=float, default=None, help="Last odds ratio (inclusive)")
    parser.add_argument("--samples-start", type=int, default=None, help="First sample size")
    parser.add_argument("--samples-step", type=int, default=None, help="Sample size step")
    parser.add_argument("--samples-end", type=int, default=None, help="Last sample size (inclusive)")
    parser.add_argument("--repeats", type=int, default=None, help="Trials per (OR, sample size) cell")

    # Phenotype model
    parser.add_argument("--maf", type=float, default=None,
                       help="Fraction of the population carrying the element")
    parser.add_argument("--sampling-ratio", type=float, default=None,
                       help="Target ratio of cases to controls")

    # External tool
    parser.add_argument("--kmers", "-k", dest="feature_file", default=None,
                       help="Feature (k-mer) file passed to the tool with -k")
    parser.add_argument("--tool", default=None, help="Association tool executable")
    parser.add_argument("--tool-arg", dest="extra_args", action='append', default=None,
                       help="Extra argument appended to the tool command (repeatable; use --tool-arg=--flag for dashed values)")
    parser.add_argument("--timeout", type=float, default=None,
                       help="Seconds before a tool run is abandoned and the trial marked failed")
    parser.add_argument("--struct-format", dest="structure_format", default=None,
                       choices=list(STRUCTURE_FORMATS),
                       help="Format of the staged structure matrix (arma is what seer reads)")

    # Execution
    parser.add_argument("--n-jobs", "-j", type=int, default=None, help="Trials run concurrently")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible sweep")
    parser.add_argument("--work-dir", default=None, help="Directory for staged trial files")

    # Output
    parser.add_argument("--output", "-o", default=None,
                       help="Also write the results table (with header) to this file")
    parser.add_argument("--summary", default=None,
                       help="Output prefix for the power summary table and power curve plot")
    parser.add_argument("--no-plot", action='store_true',
                       help="Write the power summary without the plot")
    parser.add_argument("--min-hits", type=int, default=None,
                       help="Smallest tool result counted as a detection in the summary")
    parser.add_argument("--progress", action='store_true', help="Show a progress bar")
    parser.add_argument("--quiet", "-q", action='store_true', help="Suppress progress messages")

    return parser.parse_args(argv)


def build_config(args) -> SweepConfig:
    """Merge the optional JSON config with command line overrides"""
    config = SweepConfig.from_json(args.config) if args.config else SweepConfig()
    overrides = {name: getattr(args, name, None) for name in CONFIG_FIELDS}
    return config.updated(**overrides).validate()
