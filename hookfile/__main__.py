from hookfile.cli import main

main()
