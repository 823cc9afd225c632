"""URL slug generation with per-store uniqueness."""

import re
import unicodedata
import uuid
from typing import Container, Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.store_service.errors import SlugAllocationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

MAX_SLUG_LENGTH = 60


def slugify(name: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Lowercase ASCII slug with runs of other characters collapsed to '-'."""
    ascii_name = (
        unicodedata.normalize("NFKD", name or "")
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name).strip("-")
    return slug[:max_length].rstrip("-")


def next_free_slug(
    base: str,
    taken: Container[str],
    max_attempts: int,
    max_length: int = MAX_SLUG_LENGTH,
) -> str:
    """Return ``base`` or the first ``base-N`` not in ``taken``.

    The base is shortened so that ``base-N`` never exceeds ``max_length``.
    Raises SlugAllocationError once ``max_attempts`` candidates are used up.
    """
    candidate = base
    for counter in range(1, max_attempts + 1):
        if candidate not in taken:
            return candidate
        suffix = f"-{counter}"
        candidate = base[: max_length - len(suffix)].rstrip("-") + suffix
    raise SlugAllocationError(
        f"Could not allocate a unique slug for '{base}' after {max_attempts} attempts"
    )


async def generate_unique_slug(
    db: AsyncSession,
    model,
    name: str,
    store_id: uuid.UUID,
    exclude_id: Optional[uuid.UUID] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """Derive a slug from ``name`` unused by any other ``model`` row in the store.

    ``model`` is any mapped class with ``id``, ``store_id`` and ``slug``
    columns. The row being updated (``exclude_id``) does not count as a clash.
    """
    if max_attempts is None:
        max_attempts = get_settings().SLUG_MAX_ATTEMPTS

    base = slugify(name) or uuid.uuid4().hex[:12]
    # Shortest form the base takes once the largest suffix is appended
    prefix = base[: MAX_SLUG_LENGTH - len(f"-{max_attempts}")].rstrip("-")

    query = select(model.slug).where(
        model.store_id == store_id,
        model.slug.like(f"{prefix}%"),
    )
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)

    taken = set((await db.execute(query)).scalars().all())
    slug = next_free_slug(base, taken, max_attempts)
    if slug != base:
        logger.info("Slug %s taken for %s, using %s", base, model.__name__, slug)
    return slug


async def backfill_missing_slugs(db: AsyncSession, models) -> int:
    """Give every row of ``models`` with an empty slug a unique one.

    Returns the number of rows updated; changes are committed per model.
    """
    updated = 0
    for model in models:
        rows = (
            await db.execute(
                select(model)
                .where((model.slug.is_(None)) | (model.slug == ""))
                .order_by(model.created_at)
            )
        ).scalars().all()
        for row in rows:
            row.slug = await generate_unique_slug(
                db, model, row.name, row.store_id, exclude_id=row.id
            )
            # Later rows in the batch must see this slug as taken
            await db.flush()
            logger.info("Updated %s %s -> %s", model.__name__, row.name, row.slug)
            updated += 1
        await db.commit()
    return updated
