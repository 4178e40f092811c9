"""
Package entry point.

Allows running the application via:

    python -m pickcourse

This simply forwards execution to pickcourse.cli.main().
"""

from pickcourse.cli import main

if __name__ == "__main__":
    main()
