# api/db.py
import os
import uuid
from datetime import datetime, timezone

from dotenv import load_dotenv
from sqlalchemy import DateTime, Float, String, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

load_dotenv()

DEFAULT_DATABASE = "sqlite:///./earthquakes.db"


def utcnow():
    return datetime.now(timezone.utc)


def new_id():
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class Earthquake(Base):
    __tablename__ = "earthquakes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    magnitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def make_engine(url: str = None) -> Engine:
    engine = create_engine(
        url or os.getenv("DATABASE", DEFAULT_DATABASE),
        future=True,
        pool_pre_ping=True,
    )
    if engine.dialect.name == "sqlite":
        # SQLite's built-in lower() only folds ASCII; match Python's str.lower.
        @event.listens_for(engine, "connect")
        def _register_lower(dbapi_conn, _connection_record):
            dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)
