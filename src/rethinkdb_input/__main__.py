from rethinkdb_input.cli import main

main()
