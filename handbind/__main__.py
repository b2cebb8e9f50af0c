from handbind.cli import main

raise SystemExit(main())
