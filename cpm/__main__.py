from cpm.cli_app import main

raise SystemExit(main())
