"""Allow running as `python -m skillpack`."""

from skillpack.cli.app import app

if __name__ == "__main__":
    app()
