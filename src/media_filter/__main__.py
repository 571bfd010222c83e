"""Module entrypoint for `python -m media_filter`."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
