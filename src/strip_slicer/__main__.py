"""Allow ``python -m strip_slicer``."""

from strip_slicer.cli import main

raise SystemExit(main())
