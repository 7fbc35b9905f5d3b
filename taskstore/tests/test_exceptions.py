from taskstore.domain.shared.exceptions import (
    DatabaseConnectionError,
    ErrorType,
    MappingError,
    NotFoundError,
    QueryError,
    TaskStoreError,
)


def test_not_found_to_dict():
    error = NotFoundError(7)

    assert error.to_dict() == {
        "type": "not_found",
        "message": "Task not found: 7",
        "details": {"task_id": 7, "entity_type": "task"},
    }


def test_query_error_records_operation():
    error = QueryError("boom", "tasks_by_label")

    assert error.operation == "tasks_by_label"
    assert error.details["operation"] == "tasks_by_label"
    assert error.error_type == ErrorType.QUERY


def test_connection_error_is_builtin_connection_error():
    error = DatabaseConnectionError("down")

    assert isinstance(error, ConnectionError)
    assert isinstance(error, TaskStoreError)


def test_all_errors_share_base():
    for error in (
        DatabaseConnectionError("x"),
        QueryError("x", "op"),
        NotFoundError(1),
        MappingError("x"),
    ):
        assert isinstance(error, TaskStoreError)
