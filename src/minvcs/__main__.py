"""Allow ``python -m minvcs``."""

from .cli import run

run()
