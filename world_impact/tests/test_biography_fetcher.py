import json

import pytest
import requests

from config.settings import BiographySource, Settings
from world_impact.errors import BiographyNotFoundError
from world_impact.utils.biography_fetcher import (
    GatewayBiographyFetcher,
    WikipediaBiographyFetcher,
    create_biography_fetcher,
)
from world_impact.utils.retry import RetryPolicy

# --- Fixtures and Helpers ---

NO_WAIT = RetryPolicy(max_attempts=3, cold_start_delay=0, backoff_base_delay=0)


def make_response(status_code: int, body=None, text: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = text.encode("utf-8")
    return response


@pytest.fixture
def session():
    return requests.Session()


@pytest.fixture
def gateway_fetcher(settings, session):
    return GatewayBiographyFetcher(settings, session=session, retry_policy=NO_WAIT)


# --- Gateway ---


def test_gateway_posts_person_name(gateway_fetcher, session, mocker, biography_text):
    request = mocker.patch.object(
        session,
        "request",
        return_value=make_response(200, {"success": True, "content": biography_text}),
    )

    document = gateway_fetcher.fetch("Marie Curie")

    assert document.content == biography_text
    args, kwargs = request.call_args
    assert args == ("POST", "http://gateway.test/world-impact-analysis")
    assert kwargs["json"] == {"personName": "Marie Curie"}


def test_gateway_retries_cold_start(gateway_fetcher, session, mocker, biography_text):
    request = mocker.patch.object(
        session,
        "request",
        side_effect=[
            make_response(500, text="cold"),
            make_response(200, {"success": True, "content": biography_text}),
        ],
    )

    document = gateway_fetcher.fetch("Marie Curie")

    assert request.call_count == 2
    assert document.word_count > 10


def test_gateway_reports_unsuccessful_payload(gateway_fetcher, session, mocker):
    mocker.patch.object(
        session,
        "request",
        return_value=make_response(200, {"success": False, "error": "Page not found"}),
    )

    with pytest.raises(BiographyNotFoundError, match="Page not found"):
        gateway_fetcher.fetch("Xyzzy Qwerty")


def test_gateway_reports_error_status(gateway_fetcher, session, mocker):
    mocker.patch.object(session, "request", return_value=make_response(403, text="denied"))

    with pytest.raises(BiographyNotFoundError, match="status 403"):
        gateway_fetcher.fetch("Marie Curie")


def test_gateway_reports_unreachable_service(gateway_fetcher, session, mocker):
    mocker.patch.object(session, "request", side_effect=requests.exceptions.ConnectionError("down"))

    with pytest.raises(BiographyNotFoundError, match="Could not reach the biography service") as exc_info:
        gateway_fetcher.fetch("Marie Curie")

    assert exc_info.value.status_code == 400


def test_gateway_requires_configured_url(session):
    fetcher = GatewayBiographyFetcher(Settings(_env_file=None), session=session)

    with pytest.raises(BiographyNotFoundError, match="not configured"):
        fetcher.fetch("Marie Curie")


def test_empty_content_is_rejected(gateway_fetcher, session, mocker):
    mocker.patch.object(
        session, "request", return_value=make_response(200, {"success": True, "content": "   "})
    )

    with pytest.raises(BiographyNotFoundError, match="Wikipedia returned empty content"):
        gateway_fetcher.fetch("Marie Curie")


def test_long_content_is_truncated(settings, session, mocker):
    settings.max_biography_length = 100
    fetcher = GatewayBiographyFetcher(settings, session=session, retry_policy=NO_WAIT)
    mocker.patch.object(
        session, "request", return_value=make_response(200, {"success": True, "content": "word " * 500})
    )

    assert len(fetcher.fetch("Marie Curie").content) == 100


# --- Wikipedia ---


def test_wikipedia_article_url(settings, session):
    fetcher = WikipediaBiographyFetcher(settings, session=session)
    assert fetcher.article_url(" Marie Curie ") == "https://en.wikipedia.org/wiki/Marie_Curie"


def test_wikipedia_extracts_main_text(settings, session, mocker, biography_text):
    fetcher = WikipediaBiographyFetcher(settings, session=session, retry_policy=NO_WAIT)
    mocker.patch.object(session, "request", return_value=make_response(200, text="<html>...</html>"))
    mocker.patch(
        "trafilatura.extract",
        return_value=json.dumps({"title": "Marie Curie", "text": biography_text}),
    )

    document = fetcher.fetch("Marie Curie")

    assert document.title == "Marie Curie"
    assert document.content == biography_text
    assert document.source_url.endswith("/wiki/Marie_Curie")


def test_wikipedia_missing_article(settings, session, mocker):
    fetcher = WikipediaBiographyFetcher(settings, session=session, retry_policy=NO_WAIT)
    mocker.patch.object(session, "request", return_value=make_response(404, text="missing"))

    with pytest.raises(BiographyNotFoundError, match="No Wikipedia entry found"):
        fetcher.fetch("Xyzzy Qwerty")


def test_factory_selects_configured_source(settings):
    assert isinstance(create_biography_fetcher(settings), GatewayBiographyFetcher)

    settings.biography_source = BiographySource.WIKIPEDIA
    assert isinstance(create_biography_fetcher(settings), WikipediaBiographyFetcher)
