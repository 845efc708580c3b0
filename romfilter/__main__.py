from romfilter.cli import main

main()
