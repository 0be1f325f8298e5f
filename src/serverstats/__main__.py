from serverstats.report import main

main()
