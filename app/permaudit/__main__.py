"""Allow running permaudit with ``python -m permaudit``."""

from permaudit.cli.main import app

app()
