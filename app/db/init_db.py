import logging
from typing import List

from app.db.base import Base
from app.db.session import engine
from app.models.review import OWNED_TABLES

logger = logging.getLogger(__name__)

def create_review_tables(bind=engine) -> List[str]:
    """
    Create the review tables if they don't exist.

    Only the tables this service owns are created; `properties` and `users`
    must already exist in the target database.
    """
    Base.metadata.create_all(bind=bind, tables=OWNED_TABLES, checkfirst=True)
    names = [table.name for table in OWNED_TABLES]
    logger.info("Review tables ensured: %s", ", ".join(names))
    return names

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_review_tables()
