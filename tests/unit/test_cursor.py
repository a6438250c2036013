from unittest.mock import MagicMock

import pytest

from rethinkdb_input.cursor import stream_documents

from ..conftest import FakeConnection, FakeCursor, FakeDriver


def test_documents_stream_in_cursor_order(fake_driver):
    plan = fake_driver.table("items")

    docs = list(stream_documents(plan, FakeConnection()))

    assert [d["id"] for d in docs] == [1, 2, 3]
    assert fake_driver.cursors[0].closed


def test_stream_is_lazy(fake_driver):
    plan = fake_driver.table("items")

    stream = stream_documents(plan, FakeConnection())

    assert fake_driver.run_calls == []
    first = next(stream)
    assert first["id"] == 1
    assert fake_driver.cursors[0].fetched == 1
    stream.close()
    assert fake_driver.cursors[0].closed


def test_empty_result_yields_nothing():
    driver = FakeDriver(tables={"empty": []})

    assert list(stream_documents(driver.table("empty"), FakeConnection())) == []


def test_fetch_errors_propagate_and_close_cursor():
    driver = FakeDriver(tables={"t": [{"a": 1}, {"a": 2}]}, fail_at=1)

    with pytest.raises(ConnectionResetError):
        list(stream_documents(driver.table("t"), FakeConnection()))

    assert driver.cursors[0].closed


def test_single_value_result_is_one_document():
    driver = FakeDriver()

    assert list(stream_documents(driver.expr({"count": 3}), FakeConnection())) == [{"count": 3}]


def test_array_result_is_streamed_element_wise():
    driver = FakeDriver()

    assert list(stream_documents(driver.expr([1, 2, 3]), FakeConnection())) == [1, 2, 3]


def test_plan_runs_on_given_connection():
    plan = MagicMock()
    plan.run.return_value = FakeCursor([{"x": 1}])
    conn = FakeConnection()

    assert list(stream_documents(plan, conn)) == [{"x": 1}]
    plan.run.assert_called_once_with(conn)
