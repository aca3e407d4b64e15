"""Allow ``python -m filetally``."""

from .cli import main

main()
