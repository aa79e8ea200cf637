"""Allow running as ``python -m osstatus``."""

from osstatus.cli.main import app

if __name__ == "__main__":
    app()
