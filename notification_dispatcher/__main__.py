from notification_dispatcher.main import main

main()
