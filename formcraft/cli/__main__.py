from formcraft.cli.main import main

main()
