from chartpub.cli.app import main

main()
