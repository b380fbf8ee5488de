"""Allow ``python -m zklock``."""

from zklock.cli.main import run

if __name__ == "__main__":
    run()
