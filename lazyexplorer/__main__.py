"""Module entrypoint for ``python -m lazyexplorer``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing happens in ``lazyexplorer.cli``.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
