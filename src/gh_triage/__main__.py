"""Entry point for ``python -m gh_triage``."""

import sys

from gh_triage.cli import main

if __name__ == "__main__":
    sys.exit(main())
