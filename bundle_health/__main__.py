"""Allow `python -m bundle_health`."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
