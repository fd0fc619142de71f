from comp_engine.cli import main

raise SystemExit(main())
