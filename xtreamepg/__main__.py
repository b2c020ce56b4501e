from xtreamepg.main import main

main()
