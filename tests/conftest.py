"""Pytest configuration for the cart rewards tests

Every test gets its own SQLite file database so sessions opened by different
fixtures (or by the concurrency tests) see each other's commits.
"""
import os
from decimal import Decimal

import pytest

# Must be set before cartrewards.core builds its engine
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("DB_RETRY_BASE_DELAY", "0")

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from cartrewards.core import Base, build_engine, get_db
from cartrewards.models import RewardType
from cartrewards.services import StoreService, MilestoneService


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def test_db_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'cartrewards.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


# ============================================================================
# Domain Fixtures
# ============================================================================

@pytest.fixture
def store(db):
    return StoreService.create_store(
        db,
        shopify_store_id="realbeauty.myshopify.com",
        store_name="Real Beauty",
        access_token="shpat_test",
        delivery_fee=Decimal("300"),
    )


@pytest.fixture
def ladder(db, store):
    """2500 free delivery, then 3000/4000/5000 free products (1/2/3)"""
    rows = [
        ("2500", RewardType.FREE_DELIVERY, 0),
        ("3000", RewardType.FREE_PRODUCTS, 1),
        ("4000", RewardType.FREE_PRODUCTS, 2),
        ("5000", RewardType.FREE_PRODUCTS, 3),
    ]
    milestones = {}
    for threshold, reward_type, count in rows:
        milestones[threshold] = MilestoneService.create_milestone(db, store.id, {
            "name": f"{threshold} reward",
            "threshold_amount": Decimal(threshold),
            "reward_type": reward_type,
            "free_product_count": count,
        })
    return milestones


# ============================================================================
# Application & Client Fixtures
# ============================================================================

@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
