from roomgraph.cli import main

raise SystemExit(main())
