"""
Package entry point.

Allows running the application via:

    python -m workday_ical

This simply forwards execution to workday_ical.cli.main().
"""

from workday_ical.cli import main

if __name__ == "__main__":
    main()
