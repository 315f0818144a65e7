from sync_versions_poetry.cli import main

main()
