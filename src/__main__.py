from src.server.app import main

main()
