"""
Package entry point.

Allows running the application via:

    python -m uniroutine

This simply forwards execution to uniroutine.cli.main().
"""

from uniroutine.cli import main

if __name__ == "__main__":
    main()
