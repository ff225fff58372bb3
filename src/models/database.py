"""
SQLAlchemy database models and session management for the travel catalog.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Generator

from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    String,
    Text,
    Date,
    DateTime,
    Enum,
    Boolean,
    Float,
    Index,
    CheckConstraint,
    JSON,
)
from sqlalchemy.orm import declarative_base, Session, sessionmaker
from sqlalchemy.engine import Engine

from config import get_settings

# Create declarative base
Base = declarative_base()

# Database engine and session factory (initialized by init_db)
engine: Engine | None = None
SessionLocal: sessionmaker | None = None


class TravelPackage(Base):
    """
    Travel package offered on the site.
    """
    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    duration = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)
    max_guests = Column(Integer, nullable=True)
    rating = Column(Float, nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    # Storage paths, resolved to public URLs by the storage service
    images = Column(JSON, nullable=False, default=list)
    pdfs = Column(JSON, nullable=False, default=list)
    status = Column(
        Enum("active", "draft", "inactive", name="package_status"),
        nullable=False,
        default="active",
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_package_price_positive"),
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="ck_package_rating_range"),
        Index("ix_package_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<TravelPackage(id={self.id}, title='{self.title}', price={self.price}, "
            f"status='{self.status}')>"
        )


class AirTicket(Base):
    """
    Air ticket offer listed on the site.
    """
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    origin = Column(String(100), nullable=False)
    destination = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    departure_date = Column(Date, nullable=True)
    return_date = Column(Date, nullable=True)
    airline = Column(String(100), nullable=True)
    flight_class = Column(
        Enum("economy", "premium_economy", "business", "first", name="flight_class"),
        nullable=True,
    )
    available_seats = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    images = Column(JSON, nullable=False, default=list)
    status = Column(
        Enum("active", "draft", "sold_out", name="ticket_status"),
        nullable=False,
        default="active",
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_ticket_price_positive"),
        CheckConstraint(
            "return_date IS NULL OR departure_date IS NULL OR return_date >= departure_date",
            name="ck_ticket_return_after_departure",
        ),
        Index("ix_ticket_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<AirTicket(id={self.id}, route='{self.origin} -> {self.destination}', "
            f"price={self.price} {self.currency}, status='{self.status}')>"
        )


class NewsArticle(Base):
    """
    News article shown in the site's news section.
    """
    __tablename__ = "news"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    excerpt = Column(String(500), nullable=True)
    content = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    images = Column(JSON, nullable=False, default=list)
    status = Column(
        Enum("published", "draft", name="news_status"),
        nullable=False,
        default="published",
    )
    published_on = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_news_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<NewsArticle(id={self.id}, title='{self.title}', status='{self.status}')>"


# Table name -> ORM model, as addressed by the catalog store
TABLES = {
    TravelPackage.__tablename__: TravelPackage,
    AirTicket.__tablename__: AirTicket,
    NewsArticle.__tablename__: NewsArticle,
}


def get_database_url() -> str:
    """
    Get the catalog database URL from the application settings.

    Returns:
        Database connection string (DATABASE_URL, or the local SQLite default)
    """
    return get_settings().database_url


def init_db(database_url: str | None = None) -> Engine:
    """
    Initialize database engine and session factory.

    Args:
        database_url: Optional database connection string. If not provided,
                     the configured DATABASE_URL setting is used.

    Returns:
        SQLAlchemy Engine instance
    """
    global engine, SessionLocal

    if database_url is None:
        database_url = get_database_url()

    engine_options = {"echo": False, "pool_pre_ping": True}
    # SQLite uses a singleton/static pool that takes no sizing options
    if not database_url.startswith("sqlite"):
        engine_options.update(pool_size=5, max_overflow=10)

    engine = create_engine(database_url, **engine_options)

    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )

    return engine


def create_tables() -> None:
    """
    Create all tables in the database.

    Raises:
        RuntimeError: If database engine is not initialized
    """
    if engine is None:
        raise RuntimeError("Database engine not initialized. Call init_db() first.")

    Base.metadata.create_all(bind=engine)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions with automatic cleanup.

    Yields:
        SQLAlchemy Session instance

    Example:
        with get_db_session() as session:
            package = session.query(TravelPackage).first()

    Raises:
        RuntimeError: If session factory is not initialized
    """
    if SessionLocal is None:
        raise RuntimeError("Session factory not initialized. Call init_db() first.")

    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
