"""
Validation Service
Field rules and sanitizers shared by the entity services

Purpose:
- Reject blank, oversized or malformed names, descriptions and ids
- Accept empty search queries (they mean "return everything")
- Normalize names and descriptions to title case before saving

Author: TM3
Date: 2025-10-17
"""
import re
from typing import Iterable, Optional

from store.core.exceptions import (
    InvalidInputError,
    InvalidSearchQueryError,
    RequiredFieldError,
)

MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 255
MIN_DESCRIPTION_LENGTH = 1
MAX_DESCRIPTION_LENGTH = 500
MIN_SEARCH_QUERY_LENGTH = 1
MAX_SEARCH_QUERY_LENGTH = 100

# Letters, whitespace, hyphens and apostrophes
NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-']+$")
SEARCH_QUERY_PATTERN = NAME_PATTERN
# Letters, digits, whitespace, hyphens, apostrophes, periods and commas
DESCRIPTION_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-'.,]+$")

WORD_START = re.compile(r"(^|\s)(\S)")


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _title_case(text: str) -> str:
    """Lower-case, then upper-case the first character of every whitespace-delimited word"""
    return WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), text.lower())


class ValidationService:
    """
    Stateless validator for customer, product and query inputs

    Every validate_* method returns None on success and raises a
    ValidationException subclass on failure:
    - RequiredFieldError: value is None or blank
    - InvalidInputError: value present but breaks a length, range or charset rule
    - InvalidSearchQueryError: non-empty search query breaks the query rule
    """

    # =========================================================================
    # Names and descriptions
    # =========================================================================

    def validate_customer_name(self, name: Optional[str]) -> None:
        if not _has_text(name):
            raise RequiredFieldError("name")

        trimmed = name.strip()
        if len(trimmed) < MIN_NAME_LENGTH:
            raise InvalidInputError("name", "Name cannot be empty")

        if len(trimmed) > MAX_NAME_LENGTH:
            raise InvalidInputError("name", f"Name cannot exceed {MAX_NAME_LENGTH} characters")

        if not NAME_PATTERN.match(trimmed):
            raise InvalidInputError(
                "name", "Name can only contain letters, spaces, hyphens, and apostrophes"
            )

    def validate_product_description(self, description: Optional[str]) -> None:
        if not _has_text(description):
            raise RequiredFieldError("description")

        trimmed = description.strip()
        if len(trimmed) < MIN_DESCRIPTION_LENGTH:
            raise InvalidInputError("description", "Description cannot be empty")

        if len(trimmed) > MAX_DESCRIPTION_LENGTH:
            raise InvalidInputError(
                "description", f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
            )

        if not DESCRIPTION_PATTERN.match(trimmed):
            raise InvalidInputError(
                "description",
                "Description can only contain letters, numbers, spaces, hyphens, "
                "apostrophes, periods, and commas",
            )

    # =========================================================================
    # Ids
    # =========================================================================

    def validate_id(self, entity_id: Optional[int], field: str = "id", entity: str = "ID") -> None:
        """
        Validate an entity id

        Args:
            entity_id: Id to check
            field: Field name reported in errors
            entity: Entity label used in the message (e.g. "Customer ID")
        """
        if entity_id is None:
            raise RequiredFieldError(field)

        # bool is an int subclass, reject it explicitly
        if isinstance(entity_id, bool) or not isinstance(entity_id, int):
            raise InvalidInputError(field, f"{entity} must be an integer")

        if entity_id <= 0:
            raise InvalidInputError(field, f"{entity} must be positive")

    def validate_customer_id(self, customer_id: Optional[int], field: str = "id") -> None:
        self.validate_id(customer_id, field=field, entity="Customer ID")

    def validate_product_id(self, product_id: Optional[int], field: str = "id") -> None:
        self.validate_id(product_id, field=field, entity="Product ID")

    def validate_order_id(self, order_id: Optional[int], field: str = "id") -> None:
        self.validate_id(order_id, field=field, entity="Order ID")

    # =========================================================================
    # Search and paging
    # =========================================================================

    def validate_search_query(self, query: Optional[str]) -> None:
        """
        Validate a search query

        None, empty and whitespace-only queries are valid: they mean
        "no filter" and the caller returns the unfiltered listing.
        """
        if query is None:
            return

        trimmed = query.strip()
        if not trimmed:
            return

        if len(trimmed) < MIN_SEARCH_QUERY_LENGTH:
            raise InvalidSearchQueryError("Search query too short")

        if len(trimmed) > MAX_SEARCH_QUERY_LENGTH:
            raise InvalidSearchQueryError("Search query too long")

        if not SEARCH_QUERY_PATTERN.match(trimmed):
            raise InvalidSearchQueryError("Search query contains invalid characters")

    def validate_page_request(self, page: int, size: int, max_size: Optional[int] = None) -> None:
        """
        Validate 0-based page number and page size

        Args:
            page: Page number (>= 0)
            size: Page size (>= 1, <= max_size when given)
            max_size: Upper bound for size
        """
        if page is None:
            raise RequiredFieldError("page")
        if size is None:
            raise RequiredFieldError("size")

        if page < 0:
            raise InvalidInputError("page", "Page number cannot be negative")

        if size < 1:
            raise InvalidInputError("size", "Page size must be at least 1")

        if max_size is not None and size > max_size:
            raise InvalidInputError("size", f"Page size cannot exceed {max_size}")

    def validate_sort_field(self, sort_by: Optional[str], allowed: Iterable[str]) -> None:
        """Reject sort fields that are not sortable columns"""
        allowed = tuple(allowed)
        if not _has_text(sort_by):
            raise RequiredFieldError("sort_by")

        if sort_by not in allowed:
            raise InvalidInputError(
                "sort_by", f"Cannot sort by '{sort_by}', expected one of: {', '.join(allowed)}"
            )

    # =========================================================================
    # Sanitizers
    # =========================================================================

    def sanitize_name(self, text: Optional[str]) -> Optional[str]:
        """
        Trim and title-case a name

        Returns:
            Sanitized name, or None when nothing but whitespace is left

        Example:
            sanitize_name("  john doe  ") -> "John Doe"
        """
        if not _has_text(text):
            return None

        return _title_case(text.strip())

    def sanitize_description(self, text: Optional[str]) -> Optional[str]:
        """Trim and title-case a product description (None when blank)"""
        if not _has_text(text):
            return None

        return _title_case(text.strip())
