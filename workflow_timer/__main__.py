from workflow_timer.cli import main

main()
