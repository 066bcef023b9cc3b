from datetime import UTC, date, datetime

import pytest
from protean.integrations.pytest import DomainFixture
from tracking.gateway import reset_notification_gateway
from tracking.gateway.fake_adapter import FakeNotificationGateway
from tracking.lookup import reset_order_lookup
from tracking.lookup.fake_adapter import FakeOrderLookup
from tracking.persistence import reset_persistence
from tracking.persistence.fake_adapter import FakePersistence
from tracking.service import reset_tracking_service
from tracking.tracked_order.ledger import CheckpointLedger
from tracking.tracked_order.orchestrator import TrackedOrderOrchestrator
from tracking.tracked_order.store import TrackedOrderStore

ORDER_ID = 1001
BUYER_ID = 77
FIXED_NOW = datetime(2024, 3, 1, 14, 30, tzinfo=UTC)
DELIVERY_DATE = date(2024, 3, 8)


@pytest.fixture(scope="session")
def tracking_bed():
    from tracking.domain import tracking

    bed = DomainFixture(tracking)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(tracking_bed):
    with tracking_bed.domain_context():
        yield
    reset_tracking_service()
    reset_persistence()
    reset_order_lookup()
    reset_notification_gateway()


@pytest.fixture()
def persistence():
    return FakePersistence()


@pytest.fixture()
def lookup():
    fake = FakeOrderLookup()
    fake.register_order(ORDER_ID, buyer_id=BUYER_ID)
    return fake


@pytest.fixture()
def gateway():
    return FakeNotificationGateway()


@pytest.fixture()
def store(persistence):
    return TrackedOrderStore(persistence)


@pytest.fixture()
def ledger(persistence):
    return CheckpointLedger(persistence)


@pytest.fixture()
def orchestrator(store, ledger, lookup, gateway):
    return TrackedOrderOrchestrator(
        store=store,
        ledger=ledger,
        order_lookup=lookup,
        gateway=gateway,
        notification_timeout=0.5,
        clock=lambda: FIXED_NOW,
    )
