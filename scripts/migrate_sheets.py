"""
One-off operator script: create any missing sheets, then bring the Users
sheet to the current column layout and back-fill missing policy settings.

    python scripts/migrate_sheets.py [--year 2026]
"""
import argparse
import asyncio
import logging

from leave_sheets.core.logging import setup_logging
from leave_sheets.database import build_store
from leave_sheets.services.sheets_setup import SheetsSetupService

logger = logging.getLogger(__name__)


async def migrate(year=None):
    setup = SheetsSetupService(build_store())
    created = await setup.initialize_sheets()
    if created:
        print(f"Created sheets: {', '.join(created)}")
    result = await setup.run_migration(year)
    if result.rewritten:
        print(f"Users migrated from V{result.from_layout} to V{result.to_layout}: {result.users_migrated} rows")
    else:
        print(f"Users sheet already at V{result.to_layout}")
    if result.settings_added:
        print(f"Added settings: {', '.join(result.settings_added)}")
    return result


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Migrate the leave spreadsheet to the current layout")
    parser.add_argument("--year", type=int, default=None, help="policy year to back-fill (default: current year)")
    args = parser.parse_args()
    setup_logging()
    asyncio.run(migrate(args.year))
