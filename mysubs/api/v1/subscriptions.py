"""
Subscription API endpoints
"""
from fastapi import APIRouter, Depends, Query

from mysubs.api.deps import get_repository, get_request_timeout
from mysubs.application.subscriptions import (
    CreateSubscriptionUseCase,
    DeleteSubscriptionUseCase,
    GetSubscriptionUseCase,
    ListSubscriptionsUseCase,
    TotalCostUseCase,
    UpdateSubscriptionUseCase,
)
from mysubs.domain.errors import DecodeError
from mysubs.domain.repository import SubscriptionRepository
from mysubs.domain.year_month import YearMonth
from mysubs.schemas.subscription import (
    CreateRequest,
    ErrorResponse,
    ListResponse,
    MutationResponse,
    SubscriptionDTO,
    TotalCostResponse,
    UpdateRequest,
)


router = APIRouter(prefix="/v1/subscriptions", tags=["subscriptions"])

_ERRORS = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}
_ERRORS_WITH_404 = {**_ERRORS, 404: {"model": ErrorResponse}}


def _parse_period_bound(name: str, value: str) -> YearMonth:
    try:
        return YearMonth.parse(value)
    except DecodeError as e:
        raise DecodeError(f"{name}: {e}") from e


# === Endpoints ===

@router.post("", response_model=MutationResponse, responses=_ERRORS)
async def create_subscription(
    req: CreateRequest,
    repo: SubscriptionRepository = Depends(get_repository),
    timeout: float = Depends(get_request_timeout),
):
    """Создать новую подписку"""
    return await CreateSubscriptionUseCase(repo, timeout).execute(req)


@router.get("", response_model=ListResponse, responses=_ERRORS)
async def list_subscriptions(
    repo: SubscriptionRepository = Depends(get_repository),
    timeout: float = Depends(get_request_timeout),
):
    """Список всех подписок"""
    return await ListSubscriptionsUseCase(repo, timeout).execute()


# Declared before /{subscription_id} so "totalcost" is not taken for an id
@router.get("/totalcost", response_model=TotalCostResponse, responses=_ERRORS)
async def total_cost(
    user_id: str = Query(""),
    service_name: str = Query(""),
    from_: str = Query("", alias="from", description="MM-YYYY"),
    to: str = Query("", description="MM-YYYY"),
    repo: SubscriptionRepository = Depends(get_repository),
    timeout: float = Depends(get_request_timeout),
):
    """Суммарная стоимость подписок пользователя за период (включительно)"""
    start = _parse_period_bound("from", from_)
    end = _parse_period_bound("to", to)
    return await TotalCostUseCase(repo, timeout).execute(user_id, service_name, start, end)


@router.get("/{subscription_id}", response_model=SubscriptionDTO, responses=_ERRORS_WITH_404)
async def get_subscription(
    subscription_id: str,
    repo: SubscriptionRepository = Depends(get_repository),
    timeout: float = Depends(get_request_timeout),
):
    """Получить подписку по идентификатору"""
    return await GetSubscriptionUseCase(repo, timeout).execute(subscription_id)


@router.put("/{subscription_id}", response_model=MutationResponse, responses=_ERRORS_WITH_404)
async def update_subscription(
    subscription_id: str,
    req: UpdateRequest,
    repo: SubscriptionRepository = Depends(get_repository),
    timeout: float = Depends(get_request_timeout),
):
    """Обновить все поля существующей подписки"""
    return await UpdateSubscriptionUseCase(repo, timeout).execute(req, path_id=subscription_id)


@router.delete("/{subscription_id}", response_model=MutationResponse, responses=_ERRORS_WITH_404)
async def delete_subscription(
    subscription_id: str,
    repo: SubscriptionRepository = Depends(get_repository),
    timeout: float = Depends(get_request_timeout),
):
    """Удалить подписку"""
    return await DeleteSubscriptionUseCase(repo, timeout).execute(subscription_id)
