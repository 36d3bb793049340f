from shimai import main

main()
