"""Entry point for ``python -m linux_stats_agent``."""

import sys

from linux_stats_agent.web.server import main

if __name__ == "__main__":
    sys.exit(main())
