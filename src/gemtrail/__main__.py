from gemtrail.main import main

main()
