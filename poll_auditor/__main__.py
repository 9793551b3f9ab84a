from poll_auditor.cli import main

main()
