from ccadb_capabilities.main import main

main()
