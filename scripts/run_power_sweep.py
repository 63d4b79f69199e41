#!/usr/bin/env python3
"""
Power sweep of an association tool over subsamples of a population

Usage: run_power_sweep.py samples.txt structure.mat [options] > power.tsv
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from seerpower.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
