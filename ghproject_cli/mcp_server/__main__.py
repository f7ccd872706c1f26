"""Allow ``python -m ghproject_cli.mcp_server``."""

from ghproject_cli.mcp_server import main

main()
