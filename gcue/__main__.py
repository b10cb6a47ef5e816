"""Allow ``python -m gcue``."""

from gcue.cli import main

main()
