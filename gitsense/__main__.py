"""Allow ``python -m gitsense``."""

from gitsense.cli import main

main()
