from blockgen.cli import main

raise SystemExit(main())
