"""
Entry point for running duckscout as a module: python -m duckscout
"""

from duckscout.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
