"""Allow ``python -m cityterrain``."""

from .cli import main

raise SystemExit(main())
