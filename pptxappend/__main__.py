from pptxappend.cli import main

raise SystemExit(main())
