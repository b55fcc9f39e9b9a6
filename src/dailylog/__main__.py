"""Allow running as `python -m dailylog`."""

from .cli import main

main()
