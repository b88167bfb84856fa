"""Development entry point (without installing the package).

Runs the CLI with:
- `python main.py ...`

Why:
- The code lives in `src/` (src layout), so without an editable install Python
  cannot find `hsds_client`.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    project_root = Path(__file__).resolve().parent
    src = project_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from hsds_client.cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
