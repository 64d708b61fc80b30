"""Unit tests for run_in_transaction."""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest
from sqlalchemy.exc import DBAPIError

from infrastructure.database import RetriesExhaustedError, run_in_transaction
from infrastructure.database.transactions import get_sqlstate, is_retryable
from infrastructure.observability import TransactionProbe


class _DriverError(Exception):
    def __init__(self, sqlstate: str | None):
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


def db_error(sqlstate: str | None) -> DBAPIError:
    return DBAPIError("UPDATE art_variations", {}, _DriverError(sqlstate))


@pytest.fixture
def mock_session():
    session = AsyncMock()

    def begin():
        transaction = MagicMock()
        transaction.__aenter__ = AsyncMock(return_value=None)
        transaction.__aexit__ = AsyncMock(return_value=None)
        return transaction

    session.begin = MagicMock(side_effect=begin)
    return session


@pytest.fixture
def mock_probe():
    return create_autospec(TransactionProbe, instance=True)


class TestSqlstate:
    def test_reads_sqlstate_of_driver_error(self):
        assert get_sqlstate(db_error("40001")) == "40001"

    def test_reads_sqlstate_of_wrapped_cause(self):
        cause = _DriverError("40P01")
        adapted = Exception("adapted")
        adapted.__cause__ = cause
        error = DBAPIError("SELECT 1", {}, adapted)

        assert get_sqlstate(error) == "40P01"
        assert is_retryable(error) is True

    def test_other_codes_are_not_retryable(self):
        assert is_retryable(db_error("23505")) is False
        assert is_retryable(db_error(None)) is False


class TestRunInTransaction:
    @pytest.mark.asyncio
    async def test_returns_unit_result(self, mock_session, mock_probe):
        unit = AsyncMock(return_value="done")

        result = await run_in_transaction(
            mock_session, unit, name="set_primary", probe=mock_probe
        )

        assert result == "done"
        mock_session.begin.assert_called_once()
        mock_session.connection.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pins_isolation_level(self, mock_session, mock_probe):
        await run_in_transaction(
            mock_session,
            AsyncMock(return_value=None),
            name="set_primary",
            isolation_level="SERIALIZABLE",
            probe=mock_probe,
        )

        mock_session.connection.assert_awaited_once_with(
            execution_options={"isolation_level": "SERIALIZABLE"}
        )

    @pytest.mark.asyncio
    async def test_retries_serialization_failure(self, mock_session, mock_probe):
        unit = AsyncMock(side_effect=[db_error("40001"), "done"])

        result = await run_in_transaction(
            mock_session, unit, name="set_primary", attempts=3, probe=mock_probe
        )

        assert result == "done"
        assert unit.await_count == 2
        assert mock_session.begin.call_count == 2
        mock_probe.transaction_retried.assert_called_once_with(
            name="set_primary", attempt=1, sqlstate="40001"
        )

    @pytest.mark.asyncio
    async def test_gives_up_after_attempts(self, mock_session, mock_probe):
        unit = AsyncMock(side_effect=db_error("40P01"))

        with pytest.raises(RetriesExhaustedError) as exc_info:
            await run_in_transaction(
                mock_session,
                unit,
                name="remove_variation",
                attempts=3,
                probe=mock_probe,
            )

        assert exc_info.value.attempts == 3
        assert exc_info.value.sqlstate == "40P01"
        assert exc_info.value.name == "remove_variation"
        assert unit.await_count == 3
        mock_probe.transaction_retries_exhausted.assert_called_once_with(
            name="remove_variation", attempts=3, sqlstate="40P01"
        )

    @pytest.mark.asyncio
    async def test_non_retryable_error_propagates(self, mock_session, mock_probe):
        unit = AsyncMock(side_effect=db_error("23505"))

        with pytest.raises(DBAPIError):
            await run_in_transaction(
                mock_session,
                unit,
                name="add_variation",
                attempts=3,
                probe=mock_probe,
            )

        assert unit.await_count == 1
        mock_probe.transaction_retried.assert_not_called()
