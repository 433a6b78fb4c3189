"""Allow ``python -m magicverify``."""

from .cli import console_main

console_main()
