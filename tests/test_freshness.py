import logging
from datetime import datetime, timezone

import pytest
import time_machine

from verdict import EvaluationOptions, RawResponse, classify
from verdict._utils import generate_http_date


class TestCacheable:
    @pytest.mark.parametrize("status_code", [200, 203, 300, 301, "200"])
    def test_cacheable_status_codes(self, build_response, cacheable_headers, status_code):
        response = build_response(status_code, cacheable_headers)

        assert response.code_cacheable
        assert response.is_cacheable() is True

    @pytest.mark.parametrize("status_code", [100, 206, 400, 401, 500])
    def test_not_cacheable_status_codes(self, build_response, cacheable_headers, status_code):
        response = build_response(status_code, {**cacheable_headers, "cache-control": "max-age=600"})

        assert not response.code_cacheable
        assert response.is_cacheable() is False

    def test_expires_in_the_future(self, build_response, cacheable_headers):
        assert build_response(200, cacheable_headers).is_cacheable() is True

    def test_max_age_not_reached(self, build_response, cacheable_headers):
        headers = {**cacheable_headers, "cache-control": "max-age=300"}
        del headers["expires"]

        assert build_response(200, headers).is_cacheable() is True

    def test_neither_expires_nor_max_age(self, build_response, http_date):
        assert build_response(200, {"date": http_date(0)}).is_cacheable() is False

    def test_non_ascii_max_age(self, build_response, http_date):
        response = build_response(200, [(b"Date", http_date(0).encode()), (b"Cache-Control", b"max-age=\xb9")])

        assert response.max_age is None
        assert response.freshness_lifetime() is None
        assert response.is_cacheable() is False

    def test_invalid_expires(self, build_response, cacheable_headers):
        response = build_response(200, {**cacheable_headers, "expires": ["invalid date"]})

        assert response.expires is None
        assert response.is_cacheable() is False

    def test_invalid_date(self, build_response, cacheable_headers):
        response = build_response(200, {**cacheable_headers, "date": ["invalid date"]})

        assert response.response_date is None
        assert response.is_cacheable() is False

    @pytest.mark.parametrize(
        "headers",
        [
            pytest.param({"cache-control": "no-cache"}, id="no-cache"),
            pytest.param({"cache-control": "no-store"}, id="no-store"),
            pytest.param({"cache-control": "max-age=600, no-cache"}, id="max-age-and-no-cache"),
            pytest.param({"cache-control": 'no-cache="Set-Cookie"'}, id="qualified-no-cache"),
            pytest.param({"pragma": "no-cache"}, id="pragma-no-cache"),
            pytest.param({"vary": "something"}, id="vary"),
            pytest.param({"vary": "*"}, id="vary-star"),
        ],
    )
    def test_restricting_headers(self, build_response, cacheable_headers, headers):
        response = build_response(200, {**cacheable_headers, **headers})

        assert response.is_cacheable() is False

    def test_no_cache_without_freshness_signal(self, build_response):
        assert build_response(200, {"cache-control": ["no-cache"]}).is_cacheable() is False

    def test_no_store_without_freshness_signal(self, build_response):
        assert build_response(200, {"cache-control": ["no-store"]}).is_cacheable() is False

    def test_expires_in_the_past(self, build_response, cacheable_headers, http_date):
        response = build_response(200, {**cacheable_headers, "expires": [http_date(-5 * 60)]})

        assert response.is_cacheable() is False

    def test_expires_before_its_date(self, build_response, cacheable_headers, http_date):
        response = build_response(200, {**cacheable_headers, "expires": [http_date(-24 * 60 * 60)]})

        assert response.is_cacheable() is False

    def test_expires_in_our_past_but_not_in_its_past(self, build_response, cacheable_headers, http_date):
        headers = {**cacheable_headers, "date": http_date(-2 * 60 * 60), "expires": http_date(-60 * 60)}
        response = build_response(200, headers)

        assert response.expires_not_in_its_past() is True
        assert response.expires_not_in_our_past() is False
        assert response.is_cacheable() is False

    def test_max_age_zero(self, build_response, cacheable_headers):
        response = build_response(200, {**cacheable_headers, "cache-control": "max-age=0"})

        assert response.is_cacheable() is False

    def test_max_age_wins_over_past_expires(self, build_response, cacheable_headers, http_date):
        headers = {**cacheable_headers, "cache-control": "max-age=600", "expires": http_date(-60)}

        assert build_response(200, headers).is_cacheable() is True

    def test_custom_cacheable_status_codes(self, build_response, cacheable_headers):
        options = EvaluationOptions(cacheable_status_codes=(200, 204))

        assert build_response(204, cacheable_headers, options=options).is_cacheable() is True
        assert build_response(203, cacheable_headers, options=options).is_cacheable() is False

    def test_not_cacheable_logging(self, build_response, cacheable_headers, caplog):
        response = build_response(206, cacheable_headers)

        with caplog.at_level(logging.DEBUG):
            assert not response.is_cacheable()

        assert caplog.record_tuples == [
            (
                "verdict.core.freshness",
                logging.DEBUG,
                "Considering the response as not cacheable since its status code (206) "
                "is not in the list of cacheable status codes.",
            )
        ]

    def test_cacheable_logging_mentions_url(self, clock, cacheable_headers, caplog):
        raw = RawResponse(200, cacheable_headers, url="https://example.com/menu?page=2")
        response = classify(raw, clock=clock)

        with caplog.at_level(logging.DEBUG, logger="verdict.core.freshness"):
            assert response.is_cacheable()

        assert caplog.messages == [
            "Considering the resource located at https://example.com/menu as cacheable "
            "since it meets the criteria for being stored in the cache."
        ]


class TestAge:
    def test_current_age_from_date(self, build_response, cacheable_headers, http_date):
        response = build_response(200, {**cacheable_headers, "date": http_date(-10 * 60)})

        assert response.current_age() == 10 * 60

    def test_age_header_larger_than_apparent_age(self, build_response, cacheable_headers, http_date):
        headers = {**cacheable_headers, "date": http_date(-10 * 60), "age": str(100 * 60)}

        assert build_response(200, headers).current_age() == 100 * 60

    def test_apparent_age_larger_than_age_header(self, build_response, cacheable_headers, http_date):
        headers = {**cacheable_headers, "date": http_date(-10 * 60), "age": "60"}

        assert build_response(200, headers).current_age() == 10 * 60

    def test_date_in_the_future(self, build_response, http_date):
        assert build_response(200, {"date": http_date(60)}).current_age() == 0

    @pytest.mark.parametrize("date", [None, "yesterday"])
    def test_missing_or_invalid_date(self, build_response, date):
        headers = {} if date is None else {"date": date}

        assert build_response(200, headers).current_age() == 0

    def test_non_ascii_age_header_is_ignored(self, build_response, http_date):
        headers = [(b"Date", http_date(-30).encode()), (b"Age", b"\xb2")]

        assert build_response(200, headers).current_age() == 30

    def test_invalid_age_header_is_ignored(self, build_response, http_date):
        headers = {"date": http_date(-30), "age": "-5"}

        assert build_response(200, headers).current_age() == 30

    @time_machine.travel(datetime(2015, 8, 25, 12, 0, tzinfo=timezone.utc), tick=False)
    def test_default_clock_follows_wall_clock(self):
        date = generate_http_date(1440504000 - 600)
        response = classify(RawResponse(200, {"date": date, "cache-control": "max-age=3600"}))

        assert response.current_age() == 600
        assert response.is_cacheable()


class TestFreshnessLifetime:
    def test_expires_minus_date(self, build_response, cacheable_headers):
        assert build_response(200, cacheable_headers).freshness_lifetime() == 30 * 60

    def test_max_age_takes_priority_over_expires(self, build_response, cacheable_headers):
        response = build_response(200, {**cacheable_headers, "cache-control": "max-age=600"})

        assert response.freshness_lifetime() == 600

    def test_expires_without_date_uses_clock(self, build_response, cacheable_headers):
        headers = {**cacheable_headers}
        del headers["date"]

        assert build_response(200, headers).freshness_lifetime() == 30 * 60

    def test_malformed_max_age_falls_back_to_expires(self, build_response, cacheable_headers):
        response = build_response(200, {**cacheable_headers, "cache-control": "max-age=soon"})

        assert response.max_age is None
        assert response.freshness_lifetime() == 30 * 60

    def test_no_freshness_information(self, build_response):
        assert build_response(200, {}).freshness_lifetime() is None


class TestExpiry:
    def test_expires_in_its_past(self, build_response, cacheable_headers, http_date):
        response = build_response(200, {**cacheable_headers, "expires": http_date(-5 * 60)})
        assert response.expires_not_in_its_past() is False

        response = build_response(200, {**cacheable_headers, "expires": http_date(5 * 60)})
        assert response.expires_not_in_its_past() is True

    def test_expires_in_its_past_without_date(self, build_response, http_date):
        assert build_response(200, {"expires": http_date(5 * 60)}).expires_not_in_its_past() is False

    def test_expires_in_our_past(self, build_response, cacheable_headers, http_date):
        response = build_response(200, {**cacheable_headers, "expires": http_date(-24 * 60 * 60)})
        assert response.expires_not_in_our_past() is False

        response = build_response(200, {**cacheable_headers, "expires": http_date(24 * 60 * 60)})
        assert response.expires_not_in_our_past() is True

    def test_expires_in_our_past_without_expires(self, build_response):
        assert build_response(200, {}).expires_not_in_our_past() is False

    def test_not_expired_with_expires_in_the_future(self, build_response, cacheable_headers):
        assert build_response(200, cacheable_headers).is_expired() is False

    def test_expired_with_expires_in_the_past(self, build_response, cacheable_headers, http_date):
        response = build_response(200, {**cacheable_headers, "expires": http_date(-10 * 60)})

        assert response.is_expired() is True

    def test_expired_past_max_age(self, build_response, cacheable_headers):
        headers = {**cacheable_headers, "cache-control": "max-age=0"}
        del headers["expires"]

        assert build_response(200, headers).is_expired() is True

    def test_not_expired_before_max_age(self, build_response, cacheable_headers):
        response = build_response(200, {**cacheable_headers, "cache-control": "max-age=60000"})

        assert response.is_expired() is False

    def test_expired_by_age_header(self, build_response, cacheable_headers):
        headers = {**cacheable_headers, "cache-control": "max-age=600", "age": "600"}

        assert build_response(200, headers).is_expired() is True

    def test_expired_without_freshness_information(self, build_response):
        assert build_response(200, {}).is_expired() is True


class TestValidation:
    def test_last_modified(self, build_response, cacheable_headers):
        assert build_response(200, cacheable_headers).can_be_validated is True

    def test_etag(self, build_response, cacheable_headers):
        headers = {**cacheable_headers, "etag": ["123"]}
        del headers["last-modified"]

        response = build_response(200, headers)

        assert response.etag == "123"
        assert response.can_be_validated is True

    def test_neither_last_modified_nor_etag(self, build_response, cacheable_headers):
        headers = {**cacheable_headers}
        del headers["last-modified"]

        assert build_response(200, headers).can_be_validated is False
