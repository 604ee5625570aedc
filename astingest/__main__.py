"""Allow running as `python -m astingest`."""

import sys

from astingest.cli import main

if __name__ == "__main__":
    sys.exit(main())
