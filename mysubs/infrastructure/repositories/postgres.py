"""
SQL subscription repository (PostgreSQL in production, SQLite in tests)

One session per call. On PostgreSQL every transaction gets a local
statement_timeout equal to what is left of the request deadline, so a
slow query is cancelled by the server instead of outliving the request.
"""
import logging
import math
import uuid
from contextlib import contextmanager
from typing import Iterator

from psycopg import errors as pg_errors
from sqlalchemy import Engine, delete, func, select, text, update
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from mysubs.config import Settings
from mysubs.domain.errors import (
    RepositoryError,
    RepositoryTimeoutError,
    SubscriptionNotFoundError,
)
from mysubs.domain.subscription import Subscription
from mysubs.domain.year_month import YearMonth
from mysubs.infrastructure.db.models import SubscriptionModel
from mysubs.infrastructure.db.session import create_db_engine

logger = logging.getLogger(__name__)


def _to_domain(row: SubscriptionModel) -> Subscription:
    return Subscription(
        id=row.id,
        service_name=row.service_name,
        price=row.price,
        user_id=row.user_id,
        start_date=YearMonth.from_date(row.start_date),
        end_date=YearMonth.from_date(row.end_date),
    )


class SqlSubscriptionRepository:
    """
    SubscriptionRepository on top of SQLAlchemy ORM

    Usage:
        repo = SqlSubscriptionRepository.from_settings(get_settings())
        sub = repo.add(Subscription(...), timeout=5.0)
    """

    def __init__(self, engine: Engine, session_factory: sessionmaker | None = None):
        self.engine = engine
        self.session_factory = session_factory or sessionmaker(
            bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlSubscriptionRepository":
        engine = create_db_engine(settings.get_sqlalchemy_url(), settings.DB_SCHEMA)
        logger.info("SQL repository initialized, schema=%s", settings.DB_SCHEMA)
        return cls(engine)

    @contextmanager
    def _session(self, timeout: float | None) -> Iterator[Session]:
        """
        Session scope with deadline and error translation

        Raises:
            RepositoryTimeoutError: server cancelled the statement
            RepositoryError: any other database failure
        """
        session = self.session_factory()
        try:
            if timeout is not None and self.engine.dialect.name == "postgresql":
                ms = max(1, math.ceil(timeout * 1000))
                session.execute(
                    text("SELECT set_config('statement_timeout', :ms, true)"),
                    {"ms": str(ms)},
                )
            yield session
            session.commit()
        except DBAPIError as exc:
            session.rollback()
            if isinstance(exc.orig, pg_errors.QueryCanceled):
                raise RepositoryTimeoutError(str(exc.orig)) from exc
            raise RepositoryError(str(exc)) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise RepositoryError(str(exc)) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self, timeout: float | None = None) -> None:
        with self._session(timeout) as session:
            session.execute(text("SELECT 1"))

    def close(self) -> None:
        logger.info("disposing database engine")
        self.engine.dispose()

    def add(self, sub: Subscription, timeout: float | None = None) -> Subscription:
        row = SubscriptionModel(
            id=str(uuid.uuid4()),
            service_name=sub.service_name,
            price=sub.price,
            user_id=sub.user_id,
            start_date=sub.start_date.to_date(),
            end_date=sub.end_date.to_date(),
        )
        with self._session(timeout) as session:
            session.add(row)
            session.flush()
            stored = _to_domain(row)
        logger.info("subscription added id=%s", stored.id)
        return stored

    def update(self, sub: Subscription, timeout: float | None = None) -> None:
        with self._session(timeout) as session:
            result = session.execute(
                update(SubscriptionModel)
                .where(SubscriptionModel.id == sub.id)
                .values(
                    service_name=sub.service_name,
                    price=sub.price,
                    user_id=sub.user_id,
                    start_date=sub.start_date.to_date(),
                    end_date=sub.end_date.to_date(),
                )
            )
            if result.rowcount == 0:
                raise SubscriptionNotFoundError(sub.id)

    def delete(self, subscription_id: str, timeout: float | None = None) -> None:
        with self._session(timeout) as session:
            result = session.execute(
                delete(SubscriptionModel).where(SubscriptionModel.id == subscription_id)
            )
            if result.rowcount == 0:
                raise SubscriptionNotFoundError(subscription_id)

    def get(self, subscription_id: str, timeout: float | None = None) -> Subscription:
        with self._session(timeout) as session:
            row = session.get(SubscriptionModel, subscription_id)
            if row is None:
                raise SubscriptionNotFoundError(subscription_id)
            return _to_domain(row)

    def list_all(self, timeout: float | None = None) -> list[Subscription]:
        with self._session(timeout) as session:
            rows = session.scalars(
                select(SubscriptionModel).order_by(
                    SubscriptionModel.created_at, SubscriptionModel.id
                )
            ).all()
            return [_to_domain(r) for r in rows]

    def total_cost(
        self,
        service_name: str,
        user_id: str,
        start: YearMonth,
        end: YearMonth,
        timeout: float | None = None,
    ) -> int:
        if end < start:
            raise ValueError("invalid period: end before start")

        query = select(func.coalesce(func.sum(SubscriptionModel.price), 0)).where(
            SubscriptionModel.start_date <= end.to_date(),
            SubscriptionModel.end_date >= start.to_date(),
        )
        if service_name:
            query = query.where(SubscriptionModel.service_name == service_name)
        if user_id:
            query = query.where(SubscriptionModel.user_id == user_id)

        with self._session(timeout) as session:
            total = session.execute(query).scalar_one()
        return int(total)
