import asyncio
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the backend directory to sys.path
sys.path.append(str(Path(__file__).resolve().parent.parent))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from drivesync.services.database import MemoryAdapter  # noqa: E402
from drivesync.services.location_resolver import LocationResolver, StorageLocations  # noqa: E402
from drivesync.services.storage import LocalRemoteStorage  # noqa: E402
from drivesync.services.upload_orchestrator import UploadOrchestrator  # noqa: E402

FIXED_NOW = datetime(2024, 3, 5, 14, 7, 9, tzinfo=timezone.utc)

LOCATIONS = StorageLocations(
    attachments="/crm/attachments",
    reports="/crm/reports",
    offers="/crm/offers",
    orders="/crm/orders",
    delivery_notes="/crm/delivery-notes",
    invoices="/crm/invoices",
    production_tickets="/crm/production-tickets",
    production_ticket_templates="/crm/production-tickets/templates",
    accountancy_exports="/crm/winbooks",
)


async def seed(db: MemoryAdapter):
    await db.add_case("case-1", "DOS-2024-001")
    await db.add_request("request-1", "1234", datetime(2023, 6, 1))
    await db.add_offer("offer-1", "1234", "v2", datetime(2024, 1, 10))
    await db.add_order("order-1", "1234", datetime(2024, 2, 15), customer_name="Acme\nBuilders|BV")
    await db.add_invoice("invoice-1", "42", datetime(2024, 4, 1))
    await db.add_session("session-1", "user-1", "token-1", datetime(2100, 1, 1, tzinfo=timezone.utc))
    await db.add_session("session-expired", "user-2", "token-2", datetime(2000, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def store():
    db = MemoryAdapter()
    asyncio.run(seed(db))
    return db


@pytest.fixture
def resolver(store):
    return LocationResolver(store, locations=LOCATIONS, clock=lambda: FIXED_NOW)


@pytest.fixture
def orchestrator(resolver):
    return UploadOrchestrator(resolver)


@pytest.fixture
def drive_dir(tmp_path):
    return tmp_path / "drive"


@pytest.fixture
def remote(drive_dir):
    return LocalRemoteStorage(base_dir=drive_dir)
