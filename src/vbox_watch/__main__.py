from vbox_watch.cli import main

main()
