from moon_dst.cli.main import main

main()
