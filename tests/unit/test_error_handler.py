"""Unit tests for GraphQL error classification."""

from __future__ import annotations

import logging

import pytest
from graphql import GraphQLError
from sqlalchemy.exc import OperationalError

from social_graph.core.database import ConflictError, NotFoundError
from social_graph.features.graphql.error_handler import (
    ErrorCategory,
    error_code,
    log_graphql_error,
    should_mask_error,
    to_graphql_error,
)


def test_not_found_maps_to_not_found_code() -> None:
    error = to_graphql_error(NotFoundError("User", {"id": "42"}))

    assert error.extensions == {"code": ErrorCategory.NOT_FOUND, "model": "User"}
    assert error.message == "User not found with id='42'"


def test_conflict_keeps_its_message() -> None:
    error = to_graphql_error(ConflictError("already there"))

    assert error.extensions["code"] == ErrorCategory.CONFLICT
    assert error.message == "already there"


def test_store_failure_is_internal() -> None:
    error = to_graphql_error(OperationalError("SELECT", {}, Exception("down")))

    assert error.extensions["code"] == ErrorCategory.INTERNAL
    assert error.message == "Database operation failed"


def test_validation_error_has_no_path_or_original() -> None:
    assert error_code(GraphQLError("Cannot query field 'x'")) == ErrorCategory.VALIDATION


def test_resolver_error_without_code_is_internal() -> None:
    error = GraphQLError("boom", path=["users"], original_error=RuntimeError("boom"))

    assert error_code(error) == ErrorCategory.INTERNAL
    assert should_mask_error(error) is True


@pytest.mark.parametrize(
    "code",
    [ErrorCategory.VALIDATION, ErrorCategory.NOT_FOUND, ErrorCategory.CONFLICT],
)
def test_user_facing_errors_are_not_masked(code: str) -> None:
    assert should_mask_error(GraphQLError("msg", extensions={"code": code})) is False


def test_internal_errors_are_logged_at_error(caplog: pytest.LogCaptureFixture) -> None:
    original = RuntimeError("boom")
    error = GraphQLError("boom", path=["users"], original_error=original)

    with caplog.at_level(logging.INFO, logger="social_graph.features.graphql.error_handler"):
        log_graphql_error(error)

    (record,) = caplog.records
    assert record.levelno == logging.ERROR
    assert record.error_code == ErrorCategory.INTERNAL
    assert record.exception_type == "RuntimeError"


def test_user_facing_errors_are_logged_at_info(caplog: pytest.LogCaptureFixture) -> None:
    error = to_graphql_error(ConflictError("dup"))

    with caplog.at_level(logging.INFO, logger="social_graph.features.graphql.error_handler"):
        log_graphql_error(error)

    (record,) = caplog.records
    assert record.levelno == logging.INFO
    assert record.error_code == ErrorCategory.CONFLICT
