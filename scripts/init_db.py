from __future__ import annotations

import argparse
import importlib

from dotenv import load_dotenv

from staffing_backoffice.config import get_settings_module
from staffing_backoffice.database.bootstrap import apply_schema, ensure_admin_user, list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply schema.sql to the configured database.")
    parser.add_argument("--seed-admin", action="store_true", help="also create/refresh the admin account")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    if args.seed_admin:
        ensure_admin_user(db_config, username=settings.ADMIN_USERNAME, password=settings.ADMIN_PASSWORD)

    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
