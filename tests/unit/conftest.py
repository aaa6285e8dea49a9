import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # savepoint() is entered with "async with"
    uow.savepoint = MagicMock()
    uow.savepoint.return_value.__aenter__ = AsyncMock(return_value=None)
    uow.savepoint.return_value.__aexit__ = AsyncMock(return_value=False)
    return uow
