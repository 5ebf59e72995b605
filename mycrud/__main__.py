"""Module entrypoint to run `python -m mycrud`."""

import sys

from mycrud.main import main

if __name__ == "__main__":
    sys.exit(main())
