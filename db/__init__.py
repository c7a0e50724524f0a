from constants import DATABASE_URL
from sqlalchemy import create_engine
from sqlalchemy.orm import as_declarative
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.engine.base import Engine
from sqlalchemy.pool import StaticPool

if DATABASE_URL.startswith("sqlite"):
    # single shared connection so an in-memory database survives across sessions
    engine: Engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine: Engine = create_engine(DATABASE_URL)
SessionLocal: [Session] = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@as_declarative()
class Base:
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
