import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.checkout_registry import CheckoutRegistry
from src.app.use_cases.cart.calculate_pricing import CalculatePricing
from tests.fixtures.fakes import FakeInventoryGateway, InMemoryLineItemStore, RecordingNotifier


@pytest.fixture
def mock_uow():
    """UnitOfWork mock usable as an async context manager"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=None)
    return uow


@pytest.fixture
def store():
    return InMemoryLineItemStore()


@pytest.fixture
def inventory():
    return FakeInventoryGateway()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def pricing():
    return CalculatePricing()


@pytest.fixture
def checkout_registry():
    return CheckoutRegistry()
