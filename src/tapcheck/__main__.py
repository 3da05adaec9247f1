from tapcheck.cli.main import main

raise SystemExit(main())
