from artwork_deployer.main import main

main()
