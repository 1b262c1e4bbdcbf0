"""Allow ``python -m atlas.cli`` execution."""

from atlas.cli.main import main

main()
