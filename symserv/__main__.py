from symserv.cli import main

raise SystemExit(main())
