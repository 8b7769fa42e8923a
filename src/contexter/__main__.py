from __future__ import annotations

import sys

from contexter.main import main

sys.exit(main())
