import logging

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .settings import settings

logger = logging.getLogger(__name__)


def make_engine(url: str, echo: bool = False):
    """Build the pooled engine for ``url``.

    In-memory SQLite gets a single shared connection so every session sees the
    same database; file SQLite and PostgreSQL get a sized QueuePool.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    connect_args = {}
    if settings.DB_SSL_ROOT_CERT:
        connect_args = {"sslmode": "verify-full", "sslrootcert": settings.DB_SSL_ROOT_CERT}
    return create_engine(
        url,
        echo=echo,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = make_engine(settings.database_url, echo=settings.DB_ECHO)


def init_db(bind=None):
    # Import models so their tables are registered on the metadata
    from schoolhub import models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def get_db():
    with Session(engine) as session:
        yield session
