"""
Database initialization and seeding script for the travel catalog.

This script:
1. Initializes the database connection
2. Creates all tables
3. Seeds a demo catalog of packages, air tickets and news
"""
import sys
from datetime import date
from pathlib import Path

# Add src directory to path for imports
src_path = Path(__file__).parent
sys.path.insert(0, str(src_path))

from dotenv import load_dotenv
from config import get_settings
from models.database import (
    init_db,
    create_tables,
    get_db_session,
    TravelPackage,
    AirTicket,
    NewsArticle,
)


SAMPLE_PACKAGES = [
    {
        "title": "Mountain Adventure Escape",
        "description": "Hiking, climbing and alpine lodges with breathtaking mountain views.",
        "price": 1299.0,
        "duration": "7 days",
        "location": "Swiss Alps",
        "max_guests": 8,
        "rating": 4.9,
        "featured": True,
    },
    {
        "title": "Tropical Paradise Getaway",
        "description": "White sand beaches, crystal clear water and a beachfront resort.",
        "price": 1899.0,
        "duration": "10 days",
        "location": "Maldives",
        "max_guests": 4,
        "rating": 4.8,
    },
    {
        "title": "Urban Explorer Package",
        "description": "Museums, food tours and the best of the city's nightlife.",
        "price": 899.0,
        "duration": "5 days",
        "location": "Tokyo, Japan",
        "max_guests": 6,
        "rating": 4.7,
    },
]

SAMPLE_TICKETS = [
    {
        "origin": "Larnaca",
        "destination": "Athens",
        "price": 149.0,
        "currency": "EUR",
        "departure_date": date(2025, 6, 12),
        "return_date": date(2025, 6, 19),
        "airline": "Aegean Airlines",
        "flight_class": "economy",
        "available_seats": 24,
    },
    {
        "origin": "Larnaca",
        "destination": "London",
        "price": 389.0,
        "currency": "EUR",
        "departure_date": date(2025, 7, 3),
        "airline": "British Airways",
        "flight_class": "business",
        "available_seats": 6,
    },
]

SAMPLE_NEWS = [
    {
        "title": "Summer Season Packages Now Available",
        "excerpt": "Book early and secure the best prices for this summer.",
        "content": "Our summer packages are open for booking. Contact us for group rates.",
        "category": "Announcements",
        "published_on": date(2025, 3, 1),
    },
]


def _seed(session, model, rows, label: str) -> None:
    if session.query(model).first() is not None:
        print(f"✓ {label} already present")
        return

    for values in rows:
        session.add(model(**values))
    print(f"✓ Added {len(rows)} {label}")


def seed_catalog() -> None:
    """
    Seed the catalog with demo content.
    Tables that already contain rows are left untouched.
    """
    with get_db_session() as session:
        _seed(session, TravelPackage, SAMPLE_PACKAGES, "travel packages")
        _seed(session, AirTicket, SAMPLE_TICKETS, "air tickets")
        _seed(session, NewsArticle, SAMPLE_NEWS, "news articles")

    print("  - Packages:")
    for package in SAMPLE_PACKAGES:
        marker = " ★" if package.get("featured") else ""
        print(f"    • {package['title']} ({package['location']}, ${package['price']:.0f}){marker}")


def initialize_database(database_url: str | None = None) -> None:
    """
    Initialize the database: create tables and seed the demo catalog.

    Args:
        database_url: Optional database connection string. If not provided,
                     will use DATABASE_URL environment variable.
    """
    try:
        print("Initializing database...")

        engine = init_db(database_url)
        print(f"✓ Connected to database: {engine.url.database}")

        print("\nCreating database tables...")
        create_tables()
        print("✓ Tables created successfully:")
        print("  - packages")
        print("  - tickets")
        print("  - news")

        print("\nSeeding catalog...")
        seed_catalog()

        print("\n" + "="*50)
        print("Database initialization complete!")
        print("="*50)

    except Exception as e:
        print(f"\n✗ Error during database initialization: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """
    Main entry point for database initialization script.
    """
    # Load environment variables from .env file
    load_dotenv()
    database_url = get_settings().database_url

    print("="*50)
    print("Travel Catalog - Database Setup")
    print("="*50 + "\n")

    initialize_database(database_url)


if __name__ == "__main__":
    main()
