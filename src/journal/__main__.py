"""Journal CLI entry point

Usage:
    python -m src.journal <command> [options]
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
