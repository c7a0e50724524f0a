import logging

from sqlalchemy import inspect

from db import Base, engine
# imported for their side effect of registering the tables on Base.metadata
from showroom.models import user, vehicle  # noqa: F401

logger = logging.getLogger(__name__)


def init_database():
    existing_tables = set(inspect(engine).get_table_names())
    missing_tables = [name for name in Base.metadata.tables if name not in existing_tables]
    Base.metadata.create_all(bind=engine)
    if missing_tables:
        logger.info(f"Created tables: {', '.join(missing_tables)}")


def drop_database():
    Base.metadata.drop_all(bind=engine)
