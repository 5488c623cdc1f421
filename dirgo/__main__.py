from dirgo.cli import main

main()
