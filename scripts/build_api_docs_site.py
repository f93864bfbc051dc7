from __future__ import annotations

import json
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from cryptocard.main import app
from cryptocard.tools.registry import tool_manifest

SITE_API_DIR = REPO_ROOT / "docs" / "site" / "api"


def main() -> None:
    SITE_API_DIR.mkdir(parents=True, exist_ok=True)

    (SITE_API_DIR / "openapi.json").write_text(
        json.dumps(app.openapi(), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    (SITE_API_DIR / "tools.json").write_text(
        json.dumps(tool_manifest(), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


if __name__ == "__main__":
    main()
