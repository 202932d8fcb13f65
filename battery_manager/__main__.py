from battery_manager.main import main

main()
