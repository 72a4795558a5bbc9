"""bot74 command line main entrypoint: ``python -m bot74``."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import sys

from bot74.cli.run import main


if __name__ == '__main__':
    sys.exit(main())
