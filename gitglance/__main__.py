from gitglance.main import main

main()
