#!/usr/bin/env python3
"""Run a Routesim scenario without installing the package.

Usage:
    python3 run_simulation.py --scenario scenarios/two_cars.json --verbose
"""

import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).parent))

from v2xsim.cli import main


if __name__ == "__main__":
    sys.exit(main())
