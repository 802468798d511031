"""Allow ``python -m nova_cli``."""

from nova_cli.cli import main

main()
