"""Allow ``python -m idpgate``."""

from idpgate.cli.main import main

main()
