from catchview.cli import main

raise SystemExit(main())
