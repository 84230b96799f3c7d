import pytest

from modelmap.exceptions import (
    InvalidConditionError,
    ModelMapError,
    NoHandlerError,
    OperationError,
    StaleOrMissingRowError,
    error_context,
)


def test_error_context_enriches_library_errors() -> None:
    with pytest.raises(StaleOrMissingRowError) as exc_info:
        with error_context("save changes", model="people"):
            with error_context("update rows", conditions={"id": 1}):
                raise StaleOrMissingRowError("people", {"id": 1})

    err = exc_info.value
    assert [c.description for c in err.context] == ["update rows", "save changes"]
    assert err.context[1].data == {"model": "people"}


def test_error_context_wraps_foreign_errors() -> None:
    with pytest.raises(OperationError) as exc_info:
        with error_context("insert rows", rows=[]):
            raise KeyError("id")

    err = exc_info.value
    assert isinstance(err.__cause__, KeyError)
    assert str(err) == "Error insert rows: 'id'"
    assert err.context[0].data == {"rows": []}


def test_error_context_passes_through_success() -> None:
    with error_context("noop"):
        value = 1
    assert value == 1


def test_to_dict() -> None:
    err = StaleOrMissingRowError("people", {"id": 1})
    err.add_context("save changes", {"changes": {"name": "Cam"}})
    d = err.to_dict()

    assert d["error"] == "StaleOrMissingRowError"
    assert "does not exist" in d["message"]
    assert d["pk"] == "{'id': 1}"
    assert d["context"] == [
        {"description": "save changes", "data": {"changes": "{'name': 'Cam'}"}}
    ]


def test_hierarchy() -> None:
    assert issubclass(NoHandlerError, ModelMapError)
    assert issubclass(InvalidConditionError, ValueError)
    d = NoHandlerError("save", "people").to_dict()
    assert d["operation"] == "save"
    assert d["dispatch_value"] == "'people'"
