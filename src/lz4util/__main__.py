from lz4util.cli import main

raise SystemExit(main())
