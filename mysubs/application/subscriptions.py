"""
Subscription use cases - validate, map, call the repository, classify the outcome

Every repository call runs in a worker thread under the request deadline.
Outcomes are reported with the exceptions from mysubs.domain.errors:

    ValidationError / DecodeError  - rejected before the repository is called
    SubscriptionNotFoundError      - target id does not exist
    RequestTimeoutError            - deadline expired or the backend cancelled
    RepositoryError                - anything else (cause chained, not exposed)
"""
import asyncio
import logging
from typing import Any, Callable

from mysubs.application.mapping import (
    create_request_to_domain,
    domain_list_to_response,
    domain_to_dto,
    mutation_response,
    total_cost_response,
    update_request_to_domain,
)
from mysubs.application.validation import (
    validate_create_request,
    validate_guid,
    validate_total_cost_query,
    validate_update_request,
)
from mysubs.domain.errors import (
    RepositoryError,
    RepositoryTimeoutError,
    RequestTimeoutError,
    SubscriptionNotFoundError,
)
from mysubs.domain.repository import SubscriptionRepository
from mysubs.domain.year_month import YearMonth
from mysubs.schemas.subscription import (
    CreateRequest,
    ListResponse,
    MutationResponse,
    STATUS_CREATED,
    STATUS_DELETED,
    STATUS_UPDATED,
    SubscriptionDTO,
    TotalCostResponse,
    UpdateRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


async def call_repository(op: str, fn: Callable[..., Any], *args, timeout: float) -> Any:
    """
    Run a blocking repository method under a deadline

    The worker thread is not interrupted when the deadline expires; the
    caller just stops waiting for it.

    Args:
        op: Operation name for logs
        fn: Bound repository method; receives `timeout` as keyword
        timeout: Seconds allowed for the call

    Raises:
        RequestTimeoutError: deadline expired or backend cancelled the statement
        SubscriptionNotFoundError: passed through from the repository
        RepositoryError: any other failure
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(fn, *args, timeout=timeout), timeout
        )
    except (asyncio.TimeoutError, RepositoryTimeoutError) as exc:
        logger.warning("%s: request timed out after %.1fs", op, timeout)
        raise RequestTimeoutError() from exc
    except SubscriptionNotFoundError:
        raise
    except Exception as exc:
        logger.error("%s: repository error: %r", op, exc)
        raise RepositoryError(op) from exc


class _UseCase:
    def __init__(self, repo: SubscriptionRepository, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.repo = repo
        self.timeout = timeout


class CreateSubscriptionUseCase(_UseCase):
    async def execute(self, req: CreateRequest) -> MutationResponse:
        try:
            validate_create_request(req)
        except ValueError as e:
            logger.info("create: validation error: %s", e)
            raise

        sub = create_request_to_domain(req)
        stored = await call_repository("create", self.repo.add, sub, timeout=self.timeout)

        logger.info("subscription created, id: %s", stored.id)
        return mutation_response(stored.id, STATUS_CREATED)


class GetSubscriptionUseCase(_UseCase):
    async def execute(self, subscription_id: str) -> SubscriptionDTO:
        try:
            validate_guid(subscription_id)
        except ValueError as e:
            logger.info("get: validation error: %s", e)
            raise

        try:
            sub = await call_repository("get", self.repo.get, subscription_id, timeout=self.timeout)
        except SubscriptionNotFoundError:
            logger.info("row with id: %s, not found", subscription_id)
            raise

        logger.info("subscription returned, id: %s", subscription_id)
        return domain_to_dto(sub)


class UpdateSubscriptionUseCase(_UseCase):
    async def execute(self, req: UpdateRequest, path_id: str | None = None) -> MutationResponse:
        """
        Replace every mutable field of an existing subscription

        Args:
            req: Full payload; req.id falls back to path_id when omitted
            path_id: Identifier from the URL
        """
        if not req.id and path_id:
            req = req.model_copy(update={"id": path_id})

        try:
            validate_update_request(req, path_id=path_id)
        except ValueError as e:
            logger.info("update: validation error: %s", e)
            raise

        sub = update_request_to_domain(req)
        try:
            await call_repository("update", self.repo.update, sub, timeout=self.timeout)
        except SubscriptionNotFoundError:
            logger.info("row with id: %s, not found", req.id)
            raise

        logger.info("subscription updated, id: %s", req.id)
        return mutation_response(req.id, STATUS_UPDATED)


class DeleteSubscriptionUseCase(_UseCase):
    async def execute(self, subscription_id: str) -> MutationResponse:
        try:
            validate_guid(subscription_id)
        except ValueError as e:
            logger.info("delete: validation error: %s", e)
            raise

        try:
            await call_repository("delete", self.repo.delete, subscription_id, timeout=self.timeout)
        except SubscriptionNotFoundError:
            logger.info("row with id: %s, not found", subscription_id)
            raise

        logger.info("subscription deleted, id: %s", subscription_id)
        return mutation_response(subscription_id, STATUS_DELETED)


class ListSubscriptionsUseCase(_UseCase):
    async def execute(self) -> ListResponse:
        subs = await call_repository("list", self.repo.list_all, timeout=self.timeout)
        logger.info("subscriptions list returned, count=%d", len(subs))
        return domain_list_to_response(subs)


class TotalCostUseCase(_UseCase):
    async def execute(
        self,
        user_id: str,
        service_name: str,
        start: YearMonth,
        end: YearMonth,
    ) -> TotalCostResponse:
        try:
            validate_total_cost_query(user_id, service_name, start, end)
        except ValueError as e:
            logger.info("totalcost: validation error: %s", e)
            raise

        total = await call_repository(
            "totalcost", self.repo.total_cost, service_name, user_id, start, end,
            timeout=self.timeout,
        )

        logger.info(
            "user_id = %s, service_name = %s, from %s, to %s, total cost = %d",
            user_id, service_name, start, end, total,
        )
        return total_cost_response(user_id, service_name, start, end, total)


class CheckReadinessUseCase(_UseCase):
    async def execute(self) -> bool:
        """True if the repository answers a ping within the deadline"""
        try:
            await call_repository("ping", self.repo.ping, timeout=self.timeout)
        except (RequestTimeoutError, RepositoryError) as e:
            logger.warning("readiness error: %s", e.__cause__ or e)
            return False
        return True
