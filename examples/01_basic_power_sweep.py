#!/usr/bin/env python3
"""
Example 01: Basic Power Sweep

This example runs a small power sweep of seer over subsamples of a population.
Each trial draws a subsample, simulates case/control labels for the chosen
odds ratio, and asks seer how many significant k-mers it finds.

Prerequisites:
- samples.txt: '<name> <0|1>' per line (1 = sample carries the gene)
- structure.mat: population structure matrix, one row per sample (armadillo
  or numpy format; staged to seer as armadillo text)
- gene_kmers.txt.gz: k-mer counts for the gene
- ./seer: the seer executable
"""

import sys

from seerpower.config import SweepConfig
from seerpower.pipelines.power import PowerSweepPipeline
from seerpower.visualization.power_curves import save_power_report

def main():
    print("=" * 70)
    print("EXAMPLE 01: Basic Power Sweep")
    print("=" * 70)

    # A coarse grid: 3 odds ratios x 3 sample sizes x 20 repeats = 180 trials
    config = SweepConfig(
        or_start=1.0, or_step=1.0, or_end=3.0,
        samples_start=100, samples_step=100, samples_end=300,
        repeats=20,
        maf=0.25,
        sampling_ratio=1.0,
        feature_file='gene_kmers.txt.gz',
        tool='./seer',
        timeout=600,
        n_jobs=4,
        seed=2016,
    )

    pipeline = PowerSweepPipeline(config)

    print("\n1. Loading data...")
    pipeline.load_data('samples.txt', 'structure.mat')

    print("\n2. Running trials...")
    with open('example01_trials.tsv', 'w') as stream:
        results = pipeline.run(stream=stream, progress=True)

    print("\n3. Summarizing power...")
    files = save_power_report(results, 'example01', min_hits=1)

    print("\n" + "=" * 70)
    print("Sweep Complete!")
    print("=" * 70)
    print(f"\nTrials: {len(results)} ({results.n_failed} failed)")
    print("- example01_trials.tsv   (one row per trial)")
    print(f"- {files['summary']}   (power per odds ratio and sample size)")
    print(f"- {files['plot']}   (power curves)")


if __name__ == '__main__':
    sys.exit(main())
