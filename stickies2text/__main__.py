from stickies2text.cli import main

raise SystemExit(main())
