"""Unit tests for client key resolution."""

import pytest
from starlette.datastructures import Headers

from app.core.client_identifier import UNKNOWN_CLIENT, get_client_key


def test_forwarded_for_takes_first_hop() -> None:
    headers = {"x-forwarded-for": " 1.2.3.4 , 10.0.0.1, 10.0.0.2"}

    assert get_client_key(headers) == "1.2.3.4"


def test_forwarded_for_wins_over_other_headers() -> None:
    headers = {
        "x-forwarded-for": "1.2.3.4",
        "x-real-ip": "5.6.7.8",
        "cf-connecting-ip": "9.9.9.9",
    }

    assert get_client_key(headers) == "1.2.3.4"


def test_real_ip_before_cdn_header() -> None:
    headers = {"x-real-ip": "5.6.7.8", "cf-connecting-ip": "9.9.9.9"}

    assert get_client_key(headers) == "5.6.7.8"


def test_cdn_header_as_last_resort() -> None:
    assert get_client_key({"cf-connecting-ip": "9.9.9.9"}) == "9.9.9.9"


def test_header_names_are_case_insensitive() -> None:
    assert get_client_key({"X-Forwarded-For": "1.2.3.4"}) == "1.2.3.4"
    assert get_client_key(Headers({"X-Real-IP": "5.6.7.8"})) == "5.6.7.8"


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"user-agent": "pytest"},
        {"x-forwarded-for": ""},
        {"x-forwarded-for": " , 10.0.0.1"},
        {"x-real-ip": "   "},
    ],
)
def test_falls_back_to_unknown(headers: dict) -> None:
    assert get_client_key(headers) == UNKNOWN_CLIENT
    assert UNKNOWN_CLIENT == "unknown"


def test_empty_forwarded_entry_falls_through_to_real_ip() -> None:
    headers = {"x-forwarded-for": ",10.0.0.1", "x-real-ip": "5.6.7.8"}

    assert get_client_key(headers) == "5.6.7.8"


def test_repeated_forwarded_for_lines_use_first_line() -> None:
    headers = Headers(
        raw=[
            (b"x-forwarded-for", b"1.1.1.1"),
            (b"x-forwarded-for", b"2.2.2.2"),
        ]
    )

    assert get_client_key(headers) == "1.1.1.1"


@pytest.mark.parametrize("header", [b"x-real-ip", b"cf-connecting-ip"])
def test_repeated_single_address_headers_use_first_line(header: bytes) -> None:
    headers = Headers(raw=[(header, b"5.6.7.8"), (header, b"9.9.9.9")])

    assert get_client_key(headers) == "5.6.7.8"
