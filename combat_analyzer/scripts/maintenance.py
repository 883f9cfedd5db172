from __future__ import annotations

import argparse

import structlog
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..database import SessionLocal
from ..logging_config import configure_logging
from ..models import Tag, TagCategory

logger = structlog.get_logger(__name__)


def repair_null_categories(db: Session) -> int:
    """Backfill athlete-owned tags that predate categories as TECHNICAL_ERROR without outcome."""
    result = db.execute(
        update(Tag)
        .where(Tag.athlete_id.is_not(None), Tag.category.is_(None))
        .values(category=TagCategory.TECHNICAL_ERROR, outcome=None)
    )
    db.commit()
    logger.info("null_categories_repaired", updated=result.rowcount)
    return result.rowcount


def delete_global_tags(db: Session) -> int:
    """Delete every global tag together with its applications."""
    tags = list(db.scalars(select(Tag).where(Tag.athlete_id.is_(None))))
    for tag in tags:
        db.delete(tag)
    db.commit()
    logger.info("global_tags_deleted", deleted=len(tags))
    return len(tags)


COMMANDS = {
    "repair-null-categories": (repair_null_categories, "Updated {count} tags with a null category"),
    "cleanup-global-tags": (delete_global_tags, "Deleted {count} global tags"),
}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Combat analyzer database maintenance")
    parser.add_argument("command", choices=sorted(COMMANDS), help="Maintenance task to run")
    args = parser.parse_args(argv)

    configure_logging()
    action, message = COMMANDS[args.command]
    with SessionLocal() as db:
        count = action(db)
    print(message.format(count=count))


if __name__ == "__main__":
    main()
