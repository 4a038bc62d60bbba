"""Tests for subscription use cases - orchestration and outcome classification"""
import asyncio
import uuid

import pytest

from mysubs.application.subscriptions import (
    CheckReadinessUseCase,
    CreateSubscriptionUseCase,
    DeleteSubscriptionUseCase,
    GetSubscriptionUseCase,
    ListSubscriptionsUseCase,
    TotalCostUseCase,
    UpdateSubscriptionUseCase,
    call_repository,
)
from mysubs.domain.errors import (
    DecodeError,
    RepositoryError,
    RequestTimeoutError,
    SubscriptionNotFoundError,
    ValidationError,
)
from mysubs.domain.year_month import YearMonth as YM
from mysubs.schemas.subscription import CreateRequest, UpdateRequest


def _create_req(user_id: str, **overrides) -> CreateRequest:
    data = dict(
        service_name="Yandex Plus", price=400, user_id=user_id,
        start_date="07-2025", end_date="07-2026",
    )
    data.update(overrides)
    return CreateRequest.model_validate(data)


def _run(coro):
    return asyncio.run(coro)


class TestCreate:
    def test_assigns_id(self, memory_repo, user_id):
        resp = _run(CreateSubscriptionUseCase(memory_repo).execute(_create_req(user_id)))

        assert resp.status == "subscription created"
        uuid.UUID(resp.subscription_id)
        stored = memory_repo.get(resp.subscription_id)
        assert stored.price == 400
        assert stored.start_date == YM.parse("07-2025")

    def test_invalid_request_never_reaches_repository(self, spy_repo):
        req = _create_req("not-a-guid", service_name="", price=-1, start_date="", end_date="")
        with pytest.raises(ValidationError):
            _run(CreateSubscriptionUseCase(spy_repo).execute(req))
        assert spy_repo.calls == []


class TestGet:
    def test_bad_id_is_decode_error_before_repository(self, spy_repo):
        with pytest.raises(DecodeError):
            _run(GetSubscriptionUseCase(spy_repo).execute("bad-guid"))
        assert spy_repo.calls == []

    def test_not_found(self, memory_repo):
        with pytest.raises(SubscriptionNotFoundError):
            _run(GetSubscriptionUseCase(memory_repo).execute(str(uuid.uuid4())))

    def test_returns_dto(self, memory_repo, user_id):
        created = _run(CreateSubscriptionUseCase(memory_repo).execute(_create_req(user_id)))
        dto = _run(GetSubscriptionUseCase(memory_repo).execute(created.subscription_id))
        assert dto.service_name == "Yandex Plus"
        assert dto.start_date == "07-2025"


class TestUpdate:
    def test_replaces_all_fields(self, memory_repo, user_id):
        created = _run(CreateSubscriptionUseCase(memory_repo).execute(_create_req(user_id)))
        sub_id = created.subscription_id
        req = UpdateRequest.model_validate({
            "id": sub_id, "service_name": "Spotify", "price": 450, "user_id": user_id,
            "start_date": "08-2025", "end_date": "08-2025",
        })

        resp = _run(UpdateSubscriptionUseCase(memory_repo).execute(req, path_id=sub_id))

        assert resp.model_dump() == {"subscription_id": sub_id, "status": "subscription updated"}
        stored = memory_repo.get(sub_id)
        assert (stored.service_name, stored.price) == ("Spotify", 450)
        assert stored.end_date == YM.parse("08-2025")

    def test_id_taken_from_path_when_omitted(self, memory_repo, user_id):
        created = _run(CreateSubscriptionUseCase(memory_repo).execute(_create_req(user_id)))
        req = UpdateRequest.model_validate({
            "service_name": "Spotify", "price": 1, "user_id": user_id,
            "start_date": "08-2025", "end_date": "09-2025",
        })
        resp = _run(UpdateSubscriptionUseCase(memory_repo).execute(req, path_id=created.subscription_id))
        assert resp.subscription_id == created.subscription_id

    def test_absent_id(self, memory_repo, user_id):
        req = UpdateRequest.model_validate({
            "id": str(uuid.uuid4()), "service_name": "Spotify", "price": 1, "user_id": user_id,
            "start_date": "08-2025", "end_date": "09-2025",
        })
        with pytest.raises(SubscriptionNotFoundError):
            _run(UpdateSubscriptionUseCase(memory_repo).execute(req))


class TestDelete:
    def test_deletes(self, memory_repo, user_id):
        created = _run(CreateSubscriptionUseCase(memory_repo).execute(_create_req(user_id)))
        resp = _run(DeleteSubscriptionUseCase(memory_repo).execute(created.subscription_id))
        assert resp.status == "subscription deleted"
        assert memory_repo.list_all() == []

    def test_absent_id(self, memory_repo):
        with pytest.raises(SubscriptionNotFoundError):
            _run(DeleteSubscriptionUseCase(memory_repo).execute(str(uuid.uuid4())))


class TestTotalCost:
    def test_sums_overlapping(self, memory_repo, user_id):
        create = CreateSubscriptionUseCase(memory_repo)
        _run(create.execute(_create_req(user_id, price=400, start_date="07-2025", end_date="08-2025")))
        _run(create.execute(_create_req(user_id, price=300, start_date="07-2025", end_date="08-2025")))

        resp = _run(TotalCostUseCase(memory_repo).execute(
            user_id, "Yandex Plus", YM.parse("01-2025"), YM.parse("12-2025"),
        ))
        assert resp.total_cost == 700

    def test_end_before_start_rejected_before_repository(self, spy_repo, user_id):
        with pytest.raises(ValidationError, match="date range"):
            _run(TotalCostUseCase(spy_repo).execute(
                user_id, "Yandex Plus", YM.parse("09-2025"), YM.parse("08-2025"),
            ))
        assert spy_repo.calls == []


class TestOutcomeClassification:
    def test_backend_timeout(self, timeout_repo):
        with pytest.raises(RequestTimeoutError, match="timed out"):
            _run(ListSubscriptionsUseCase(timeout_repo).execute())

    def test_deadline_expiry(self, slow_repo):
        with pytest.raises(RequestTimeoutError):
            _run(ListSubscriptionsUseCase(slow_repo, timeout=0.05).execute())

    def test_other_failure_is_repository_error(self, failing_repo):
        with pytest.raises(RepositoryError) as exc:
            _run(GetSubscriptionUseCase(failing_repo).execute(str(uuid.uuid4())))
        assert "password" not in str(exc.value)
        assert isinstance(exc.value.__cause__, RuntimeError)

    def test_not_found_passes_through(self, memory_repo):
        with pytest.raises(SubscriptionNotFoundError):
            _run(call_repository("get", memory_repo.get, str(uuid.uuid4()), timeout=1.0))

    def test_timeout_passed_to_repository(self):
        seen = {}

        def fn(value, timeout=None):
            seen["timeout"] = timeout
            return value

        assert _run(call_repository("op", fn, 42, timeout=2.5)) == 42
        assert seen["timeout"] == 2.5


class TestReadiness:
    def test_ready(self, memory_repo):
        assert _run(CheckReadinessUseCase(memory_repo).execute()) is True

    def test_failing_store(self, failing_repo):
        assert _run(CheckReadinessUseCase(failing_repo).execute()) is False

    def test_slow_store(self, slow_repo):
        assert _run(CheckReadinessUseCase(slow_repo, timeout=0.05).execute()) is False
