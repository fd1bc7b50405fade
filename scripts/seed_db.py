from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hris_portal.hris_portal.database.bootstrap import ensure_demo_users
from src.hris_portal.hris_portal.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    emails = ensure_demo_users(db_config)
    print(f"OK: Seeded {', '.join(emails)} -> {DBConfig.from_dict(db_config).describe()}")


if __name__ == "__main__":
    main()
