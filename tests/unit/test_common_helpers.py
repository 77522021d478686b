"""Unit tests for shared helpers: pagination, CSV, dates and scrubbing."""

import uuid
from datetime import date, datetime, timezone

import pytest

from libs.common.csv_export import write_csv
from libs.common.datetime_utils import (
    current_week_bounds,
    ensure_utc,
    range_end,
    range_start,
)
from libs.common.errors import BadRequestError, ErrorCode
from libs.common.pagination import PageMeta, PaginationParams
from libs.common.sanitize import REDACTED, scrub_sensitive
from libs.common.validators import reject_null
from services.banners_service.service import apply_reorder
from services.codes_service.models import CodeType
from services.codes_service.service import validate_discount
from services.invoices_service.service import compute_total
from services.locations_service.service import derive_place_url
from services.resources_service.models import ResourceType
from services.resources_service.schemas import clean_tags
from services.resources_service.service import validate_source
from services.sessions_service.models import SessionType
from services.sessions_service.service import validate_composition


class TestPagination:
    def test_meta_for_middle_page(self):
        meta = PageMeta.build(total=25, page=2, limit=10)
        assert meta.total_pages == 3
        assert meta.has_next is True
        assert meta.has_prev is True

    def test_meta_for_empty_result(self):
        meta = PageMeta.build(total=0, page=1, limit=10)
        assert meta.total_pages == 0
        assert meta.has_next is False
        assert meta.has_prev is False

    def test_offset(self):
        assert PaginationParams(page=3, limit=20).offset == 40


class TestScrubSensitive:
    def test_redacts_nested_secrets(self):
        payload = {
            "email": "a@b.com",
            "password": "hunter2",
            "kids": [{"name": "Kid", "token": "abc"}],
        }
        scrubbed = scrub_sensitive(payload)
        assert scrubbed["email"] == "a@b.com"
        assert scrubbed["password"] == REDACTED
        assert scrubbed["kids"][0]["token"] == REDACTED
        assert payload["password"] == "hunter2"

    def test_scalars_pass_through(self):
        assert scrub_sensitive(5) == 5
        assert scrub_sensitive(None) is None


class TestWriteCsv:
    def test_quotes_commas_and_formats_values(self):
        content = write_csv(
            ["Name", "When", "Type", "Empty"],
            [["Smith, Jane", datetime(2024, 1, 2, tzinfo=timezone.utc), SessionType.GROUP, None]],
        )
        lines = content.splitlines()
        assert lines[0] == "Name,When,Type,Empty"
        assert lines[1] == '"Smith, Jane",2024-01-02T00:00:00+00:00,GROUP,'


class TestDatetimeUtils:
    def test_ensure_utc_attaches_timezone_to_naive_values(self):
        value = ensure_utc(datetime(2024, 1, 1, 12, 0))
        assert value.tzinfo == timezone.utc
        assert ensure_utc(None) is None

    def test_date_ranges_cover_whole_days(self):
        assert range_start(date(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = range_end(date(2024, 1, 1))
        assert end.date() == date(2024, 1, 1)
        assert end.hour == 23 and end.minute == 59

    def test_current_week_starts_on_monday(self):
        # 2024-05-16 is a Thursday
        start, end = current_week_bounds(datetime(2024, 5, 16, 15, 0, tzinfo=timezone.utc))
        assert start == datetime(2024, 5, 13, tzinfo=timezone.utc)
        assert end == datetime(2024, 5, 20, tzinfo=timezone.utc)


class TestDomainHelpers:
    def test_compute_total_accepts_dicts(self):
        assert compute_total([{"amount": 10.1}, {"amount": 5.2}]) == 15.3
        assert compute_total([]) == 0.0

    def test_place_url_needs_both_coordinates(self):
        assert derive_place_url(6.9, 79.8) == "https://www.google.com/maps?q=6.9,79.8"
        assert derive_place_url(6.9, None) is None

    def test_reorder_puts_requested_first(self):
        a, b, c, d = (uuid.uuid4() for _ in range(4))
        assert apply_reorder([a, b, c, d], [c, a]) == [c, a, b, d]

    def test_group_session_needs_kids_within_capacity(self):
        with pytest.raises(BadRequestError):
            validate_composition(SessionType.GROUP, 0, None, 10)
        with pytest.raises(BadRequestError) as exc:
            validate_composition(SessionType.GROUP, 3, None, 2)
        assert exc.value.error_code == ErrorCode.INVALID_SESSION_CAPACITY
        validate_composition(SessionType.GROUP, 2, None, 2)

    def test_individual_session_needs_kid(self):
        with pytest.raises(BadRequestError):
            validate_composition(SessionType.INDIVIDUAL, 0, None, 1)
        validate_composition(SessionType.INDIVIDUAL, 0, uuid.uuid4(), 1)

    def test_discount_code_needs_percentage_or_amount(self):
        with pytest.raises(BadRequestError):
            validate_discount(CodeType.DISCOUNT, None, None)
        validate_discount(CodeType.DISCOUNT, 0, None)
        validate_discount(CodeType.DISCOUNT, None, 100.0)
        validate_discount(CodeType.PROMOTION, None, None)

    def test_resource_source_by_type(self):
        with pytest.raises(BadRequestError):
            validate_source(ResourceType.LINK, "text", "https://cdn.test/f.pdf", None)
        with pytest.raises(BadRequestError):
            validate_source(ResourceType.DOCUMENT, "text", None, None)
        validate_source(ResourceType.DOCUMENT, None, None, "https://docs.test/f")
        validate_source(ResourceType.ARTICLE, "body", None, None)

    def test_clean_tags(self):
        assert clean_tags([" a ", "", "b", "a"]) == ["a", "b"]
        assert clean_tags(None) is None


class TestRejectNull:
    def test_passes_values_through(self):
        assert reject_null("x") == "x"
        assert reject_null(False) is False
        assert reject_null([]) == []

    def test_rejects_none(self):
        with pytest.raises(ValueError):
            reject_null(None)
