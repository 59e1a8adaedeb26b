"""
Unit tests for the store exception taxonomy

Author: TM3
Date: 2025-10-17
"""
import pytest

from store.core.exceptions import (
    CustomerNotFoundError,
    InvalidInputError,
    InvalidSearchQueryError,
    NotFoundError,
    OperationFailure,
    OrderNotFoundError,
    ProductNotFoundError,
    RequiredFieldError,
    StoreException,
    ValidationException,
)


class TestValidationExceptions:
    def test_required_field_message_and_code(self):
        error = RequiredFieldError("name")

        assert isinstance(error, ValidationException)
        assert error.message == "Required field 'name' is missing or empty"
        assert error.error_code == "REQUIRED_FIELD"
        assert error.field == "name"

    def test_invalid_input_keeps_reason(self):
        error = InvalidInputError("id", "Customer ID must be positive")

        assert str(error) == "Invalid input for field 'id': Customer ID must be positive"
        assert error.reason == "Customer ID must be positive"
        assert error.details == {"field": "id"}

    def test_invalid_search_query(self):
        error = InvalidSearchQueryError("Search query too long")

        assert isinstance(error, ValidationException)
        assert error.message == "Invalid search query: Search query too long"
        assert error.error_code == "INVALID_SEARCH_QUERY"


class TestNotFoundExceptions:
    @pytest.mark.parametrize("error_class, label", [
        (CustomerNotFoundError, "Customer"),
        (ProductNotFoundError, "Product"),
        (OrderNotFoundError, "Order"),
    ])
    def test_with_id(self, error_class, label):
        error = error_class.with_id(999)

        assert isinstance(error, NotFoundError)
        assert isinstance(error, error_class)
        assert error.message == f"{label} not found with ID: 999"
        assert error.details == {"entity_type": label, "id": 999}
        assert error.entity_id == 999

    def test_not_found_is_not_a_validation_error(self):
        assert not isinstance(CustomerNotFoundError.with_id(1), ValidationException)

    def test_explicit_entity_type(self):
        error = NotFoundError(5, entity_type="Widget")

        assert error.message == "Widget not found with ID: 5"


class TestOperationFailure:
    def test_chains_cause_without_exposing_it(self):
        cause = ConnectionError("password=secret host unreachable")

        error = OperationFailure("Failed to create customer", original_error=cause)

        assert isinstance(error, StoreException)
        assert error.__cause__ is cause
        assert error.details == {"original_error_type": "ConnectionError"}
        assert "secret" not in str(error)
