"""Entry point for running equity_analytics as a module.

Usage:
    python -m equity_analytics [options] [command] [command options]

Commands:
    curve       Reconstruct the daily equity curve
    stats       Show range-scoped statistics
    verify      Verify data integrity

Examples:
    python -m equity_analytics curve --preset ytd --save --formats csv
    python -m equity_analytics stats --from 2024-01-01 --to 2024-03-31
    python -m equity_analytics --root ~/journal verify
"""

import sys

from equity_analytics.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
