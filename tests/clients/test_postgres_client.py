"""Tests for PostgresClient - pooled connections and explicit transactions."""

import pytest
from unittest.mock import MagicMock, patch
from uuid import UUID

from clients.postgres_client import PostgresClient, Transaction, _convert_params

ORDER_ID = UUID("00000000-0000-0000-0000-00000000000a")


@pytest.fixture
def pool():
    """ThreadedConnectionPool stand-in handing out one mock connection."""
    pool = MagicMock()
    conn = MagicMock()
    pool.getconn.return_value = conn
    with patch("clients.postgres_client.psycopg2.pool.ThreadedConnectionPool", return_value=pool), \
            patch("clients.postgres_client.psycopg2.extras.register_default_jsonb"):
        yield pool
    PostgresClient._connection_pools.clear()


@pytest.fixture
def client(pool):
    return PostgresClient("postgresql://ledger@localhost/test")


def _cursor(pool):
    return pool.getconn.return_value.cursor.return_value.__enter__.return_value


class TestConvertParams:
    """UUID adaptation for psycopg2."""

    def test_converts_nested_uuids(self):
        """UUIDs inside tuples and lists become strings."""
        params = _convert_params((ORDER_ID, [ORDER_ID], 5))
        assert params == (str(ORDER_ID), [str(ORDER_ID)], 5)

    def test_none_passes_through(self):
        assert _convert_params(None) is None


class TestPool:
    """Connection pool lifecycle."""

    def test_pool_shared_per_url(self, pool):
        """Two clients for the same URL reuse one pool."""
        PostgresClient("postgresql://ledger@localhost/test")
        PostgresClient("postgresql://ledger@localhost/test")

        assert len(PostgresClient._connection_pools) == 1

    def test_connection_returned_to_pool(self, client, pool):
        """Borrowed connections are always put back."""
        with client.get_connection() as conn:
            assert conn is pool.getconn.return_value

        pool.putconn.assert_called_once_with(pool.getconn.return_value)

    def test_close_removes_pool(self, client, pool):
        client.close()

        pool.closeall.assert_called_once()
        assert PostgresClient._connection_pools == {}


class TestExecuteMethods:
    """Query execution methods."""

    def test_execute_returns_list_of_dicts(self, client, pool):
        """execute() returns list of row dicts and commits."""
        cur = _cursor(pool)
        cur.description = [("num",)]
        cur.fetchall.return_value = [{"num": 1}]

        assert client.execute("SELECT 1 AS num") == [{"num": 1}]
        pool.getconn.return_value.commit.assert_called_once()

    def test_execute_without_result_set(self, client, pool):
        """Statements with no result set return []."""
        _cursor(pool).description = None

        assert client.execute("UPDATE guests SET name = %s", ("x",)) == []

    def test_execute_single_no_rows_returns_none(self, client, pool):
        cur = _cursor(pool)
        cur.description = [("id",)]
        cur.fetchall.return_value = []

        assert client.execute_single("SELECT id FROM sales WHERE false") is None

    def test_execute_scalar(self, client, pool):
        """execute_scalar() returns the first column of the first row."""
        pool.getconn.return_value.cursor.return_value.__enter__.return_value.fetchone.return_value = (42,)

        assert client.execute_scalar("SELECT 42") == 42

    def test_uuid_params_are_converted(self, client, pool):
        cur = _cursor(pool)
        cur.description = None

        client.execute("SELECT * FROM food_orders WHERE id = %s", (ORDER_ID,))

        assert cur.execute.call_args[0][1] == (str(ORDER_ID),)


class TestTransaction:
    """All-or-nothing multi-statement writes."""

    def test_commits_on_success(self, client, pool):
        conn = pool.getconn.return_value

        with client.transaction() as tx:
            assert isinstance(tx, Transaction)

        conn.commit.assert_called_once()
        conn.rollback.assert_not_called()
        pool.putconn.assert_called_once_with(conn)

    def test_rolls_back_and_reraises(self, client, pool):
        """Any exception inside the block undoes every statement."""
        conn = pool.getconn.return_value

        with pytest.raises(RuntimeError, match="boom"):
            with client.transaction():
                raise RuntimeError("boom")

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        pool.putconn.assert_called_once_with(conn)

    def test_statements_share_one_connection(self, client, pool):
        """Transaction helpers do not commit per statement."""
        conn = pool.getconn.return_value
        cur = _cursor(pool)
        cur.description = [("id",)]
        cur.fetchall.return_value = [{"id": 1}]

        with client.transaction() as tx:
            assert tx.execute_single("SELECT id FROM sales FOR UPDATE") == {"id": 1}
            tx.execute_returning("INSERT INTO payments ... RETURNING id")
            assert conn.commit.call_count == 0

        assert pool.getconn.call_count == 1
        conn.commit.assert_called_once()
