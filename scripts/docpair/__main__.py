"""Module entry point for running scripts.docpair as a package.

Allows: python -m scripts.docpair <command>
"""

import sys

from scripts.docpair.cli import main

if __name__ == '__main__':
    sys.exit(main())
