"""Listing parameters: id validation, filter normalization, pagination bounds."""

import pytest

from crud_api.core.domain_types import SortOrder
from crud_api.core.errors import ValidationError
from crud_api.core.listing import Pagination, UserFilter, validate_user_id


@pytest.mark.parametrize("raw, expected", [
    (1, 1), (42, 42), ("7", 7), (" 9 ", 9), (2**31 - 1, 2**31 - 1),
])
def test_validate_user_id_accepts_positive_ints(raw, expected):
    assert validate_user_id(raw) == expected


@pytest.mark.parametrize("raw", [
    0, -3, "abc", "", None, 1.5, True, "1e3", 2**31, "99999999999999999999",
])
def test_validate_user_id_rejects_everything_else(raw):
    with pytest.raises(ValidationError) as exc_info:
        validate_user_id(raw)
    assert exc_info.value.field == "id"
    assert exc_info.value.http_status == 400


def test_filter_normalizes_email():
    assert UserFilter(email="  Ada@Example.COM ").email == "ada@example.com"


def test_filter_is_empty():
    assert UserFilter().is_empty
    assert not UserFilter(name="a").is_empty
    assert UserFilter(name_contains="").is_empty


def test_pagination_defaults():
    page = Pagination()
    assert page.limit == 20
    assert page.offset == 0
    assert page.order is SortOrder.ASC


def test_pagination_coerces_order_string():
    assert Pagination(order="desc").order is SortOrder.DESC


@pytest.mark.parametrize("limit", [0, -1, 101])
def test_pagination_rejects_out_of_range_limit(limit):
    with pytest.raises(ValidationError):
        Pagination(limit=limit)


def test_pagination_respects_custom_max_limit():
    assert Pagination(limit=500, max_limit=500).limit == 500
    with pytest.raises(ValidationError):
        Pagination(limit=11, max_limit=10)


def test_pagination_rejects_negative_offset():
    with pytest.raises(ValidationError):
        Pagination(offset=-1)
