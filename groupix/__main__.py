from groupix.cli import main

main()
