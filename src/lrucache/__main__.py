from __future__ import annotations

from lrucache.cli import main

raise SystemExit(main())
