"""
Seed script for default category rules.
"""

import logging
import uuid

from sqlalchemy.orm import Session

from pocketledger.database import SessionLocal, init_db
from pocketledger.models import CategoryRule

logger = logging.getLogger(__name__)


DEFAULT_CATEGORY_RULES = {
    "Groceries": ["rewe", "edeka", "aldi", "lidl", "penny", "netto", "kaufland", "supermarkt", "supermarket"],
    "Bars & Restaurants": ["restaurant", "cafe", "burger", "pizza", "mcdonald", "lieferando"],
    "Transport": ["uber", "taxi", "bvg", "mvg", "hvv", "deutschlandticket", "navigo", "ratp", "tankstelle", "shell", "aral", "db vertrieb"],
    "Media & Telecom": ["spotify", "netflix", "disney", "youtube", "telekom", "vodafone", "o2", "1&1"],
    "Health & Fitness": ["gym", "fitness", "mcfit", "apotheke"],
    "Health & Insurance": ["barmer", "aok", "techniker", "versicherung", "insurance", "allianz"],
    "Rent": ["miete", "rent", "studentenwerk", "vermietung"],
    "Shopping": ["amazon", "zalando", "ikea", "mediamarkt"],
    "Salary": ["gehalt", "salary", "lohn"],
}


def seed_category_rules(db: Session) -> int:
    """Seed default keyword rules if the table is empty. Returns rows added."""
    existing_count = db.query(CategoryRule).count()
    if existing_count > 0:
        logger.info(f"Category rules already seeded ({existing_count} rules exist)")
        return 0

    added = 0
    for category, keywords in DEFAULT_CATEGORY_RULES.items():
        for keyword in keywords:
            db.add(CategoryRule(
                id=str(uuid.uuid4()),
                pattern=keyword,
                category=category,
                is_regex=False,
            ))
            added += 1

    db.commit()
    logger.info(f"Successfully seeded {added} category rules")
    return added


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        seed_category_rules(session)
    finally:
        session.close()
