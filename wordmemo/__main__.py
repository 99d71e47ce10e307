"""Allow ``python -m wordmemo``."""

from wordmemo.cli.main import run

run()
