"""Allow running as `python -m ticketdesk`."""

from ticketdesk.cli import main

main()
