import asyncio

import pytest

from models.resource_kind import EXPENSES, INCOME
from services.exceptions import BadInputError, BadRequestError, MissingIdentifierError, RecordNotFoundError
from services.record_endpoint import DeleteRedirect, RecordEndpoint, UpdateAcknowledgement


@pytest.fixture
def expenses(database):
    return RecordEndpoint(EXPENSES, database.get_collection("expenses"))


@pytest.fixture
def income(database):
    return RecordEndpoint(INCOME, database.get_collection("invoices"))


def test_read_returns_requested_record(expenses):
    record = asyncio.run(expenses.read("e1"))
    assert record.id == "e1"
    assert record.title == "Coffee"


def test_read_missing_record(expenses):
    with pytest.raises(RecordNotFoundError):
        asyncio.run(expenses.read("nope"))


@pytest.mark.parametrize("record_id", [None, ""])
def test_operations_require_an_identifier(expenses, record_id):
    with pytest.raises(MissingIdentifierError):
        asyncio.run(expenses.read(record_id))
    with pytest.raises(MissingIdentifierError):
        asyncio.run(expenses.submit(record_id, {"intent": "delete"}))


def test_update_then_read_returns_numeric_amount(expenses):
    ack = asyncio.run(expenses.update("e1", {"title": "Coffee", "description": "Morning", "amount": "4.5"}))
    assert ack == UpdateAcknowledgement(success=True)

    record = asyncio.run(expenses.read("e1"))
    assert record.description == "Morning"
    assert record.amount == 4.5
    assert isinstance(record.amount, float)


def test_repeating_an_update_gives_the_same_record(expenses):
    fields = {"title": "Lunch", "description": "Team", "amount": "18.25"}
    asyncio.run(expenses.update("42", fields))
    first = asyncio.run(expenses.read("42"))
    asyncio.run(expenses.update("42", fields))
    assert asyncio.run(expenses.read("42")) == first


def test_bad_update_performs_no_mutation(expenses, database):
    collection = database.get_collection("expenses")
    with pytest.raises(BadInputError):
        asyncio.run(expenses.update("e1", {"title": "Coffee", "description": "", "amount": "abc"}))
    with pytest.raises(BadInputError):
        asyncio.run(expenses.update("e1", {"title": "Coffee", "amount": "3"}))
    assert collection.writes == 0
    assert collection.documents["e1"]["amount"] == 4.5


def test_update_missing_record(expenses):
    with pytest.raises(RecordNotFoundError):
        asyncio.run(expenses.update("nope", {"title": "x", "description": "", "amount": "1"}))


def test_delete_redirects_to_listing_from_detail_page(expenses, database):
    outcome = asyncio.run(expenses.delete("42", "/dashboard/expenses/42"))
    assert outcome == DeleteRedirect(location="/dashboard/expenses/")
    assert "42" not in database.get_collection("expenses").documents


def test_delete_redirects_back_to_origin(income):
    outcome = asyncio.run(income.delete("inv-1", "/dashboard/overview"))
    assert outcome.location == "/dashboard/overview"


def test_delete_without_origin_uses_listing(income):
    assert asyncio.run(income.delete("inv-1")).location == "/dashboard/income/"


def test_deleted_record_is_gone(expenses):
    asyncio.run(expenses.delete("e1"))
    with pytest.raises(RecordNotFoundError):
        asyncio.run(expenses.read("e1"))
    with pytest.raises(RecordNotFoundError):
        asyncio.run(expenses.delete("e1"))


def test_submit_dispatches_on_intent(expenses):
    outcome = asyncio.run(expenses.submit("e1", {"intent": "update", "title": "Tea", "description": "", "amount": "3"}))
    assert isinstance(outcome, UpdateAcknowledgement)
    outcome = asyncio.run(expenses.submit("e1", {"intent": "delete"}, origin="/dashboard/"))
    assert outcome == DeleteRedirect(location="/dashboard/")


def test_submit_unknown_intent_ignores_other_fields(expenses, database):
    with pytest.raises(BadRequestError):
        asyncio.run(expenses.submit("e1", {"intent": "archive", "title": "Tea", "description": "", "amount": "3"}))
    with pytest.raises(BadRequestError):
        asyncio.run(expenses.submit("e1", {"title": "Tea", "description": "", "amount": "3"}))
    assert database.get_collection("expenses").writes == 0
