"""Fill in missing slugs for products, categories, subcategories and brands.

Usage:
    python scripts/backfill_slugs.py
    ENV_FILE=.env.prod python scripts/backfill_slugs.py
"""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))
load_dotenv(project_root / os.environ.get("ENV_FILE", ".env"))

from libs.common.logging import configure_logging  # noqa: E402
from libs.db.config import AsyncSessionLocal, engine  # noqa: E402
from services.store_service.models import (  # noqa: E402
    Brand,
    Category,
    Product,
    SubCategory,
)
from services.store_service.services.slugs import backfill_missing_slugs  # noqa: E402


async def main() -> int:
    configure_logging()
    try:
        async with AsyncSessionLocal() as db:
            updated = await backfill_missing_slugs(
                db, [Product, Category, SubCategory, Brand]
            )
    finally:
        await engine.dispose()

    print(f"Slug update completed successfully ({updated} rows updated).")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
