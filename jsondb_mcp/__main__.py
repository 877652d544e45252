from jsondb_mcp.cli import main

main()
