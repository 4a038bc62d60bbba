"""
Request -> domain and domain -> response conversions
"""
from mysubs.domain.subscription import Subscription
from mysubs.domain.year_month import YearMonth
from mysubs.schemas.subscription import (
    CreateRequest,
    ListResponse,
    MutationResponse,
    SubscriptionDTO,
    TotalCostResponse,
    UpdateRequest,
)


def create_request_to_domain(req: CreateRequest) -> Subscription:
    # id is always assigned by the repository
    return Subscription(
        service_name=req.service_name,
        price=req.price,
        user_id=req.user_id,
        start_date=req.start_date,
        end_date=req.end_date,
    )


def update_request_to_domain(req: UpdateRequest) -> Subscription:
    return Subscription(
        id=req.id,
        service_name=req.service_name,
        price=req.price,
        user_id=req.user_id,
        start_date=req.start_date,
        end_date=req.end_date,
    )


def domain_to_dto(sub: Subscription) -> SubscriptionDTO:
    return SubscriptionDTO(
        service_name=sub.service_name,
        price=sub.price,
        user_id=sub.user_id,
        start_date=sub.start_date.format(),
        end_date=sub.end_date.format(),
    )


def domain_list_to_response(subs: list[Subscription]) -> ListResponse:
    return ListResponse(subscriptions=[domain_to_dto(s) for s in subs])


def mutation_response(subscription_id: str, status: str) -> MutationResponse:
    return MutationResponse(subscription_id=subscription_id, status=status)


def total_cost_response(
    user_id: str,
    service_name: str,
    start: YearMonth,
    end: YearMonth,
    total_cost: int,
) -> TotalCostResponse:
    return TotalCostResponse.model_validate({
        "user_id": user_id,
        "service_name": service_name,
        "from": start.format(),
        "to": end.format(),
        "total_cost": total_cost,
    })
