# world_impact/utils/biography_fetcher.py

"""
Biography Fetcher Utility.

Fetches the raw Wikipedia biography text for a person, either through the
serverless biography gateway or directly from Wikipedia (main text extracted
with trafilatura). Both paths go through fetch_with_retry.
"""

import json
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

import requests
import trafilatura
from pydantic import BaseModel, Field

from config.settings import BiographySource, Settings
from world_impact.errors import BiographyNotFoundError
from world_impact.utils.logger import get_logger
from world_impact.utils.retry import RetryPolicy, fetch_with_retry

logger = get_logger("BiographyFetcher")


class BiographyDocument(BaseModel):
    """Raw biography text as returned by a provider."""

    person_name: str = Field(description="Name the biography was requested for.")
    content: str = Field(description="Plain biography text.")
    source_url: Optional[str] = Field(default=None, description="Where the text came from.")
    title: Optional[str] = None

    @property
    def word_count(self) -> int:
        return len(self.content.split())


class BiographyFetcher(ABC):
    """
    Base class for biography providers.

    Subclasses implement _fetch_content; fetch applies the shared empty-content
    check and length cap.
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", settings.user_agent)
        self.retry_policy = retry_policy or RetryPolicy.from_settings(settings)

    @abstractmethod
    def _fetch_content(self, person_name: str) -> BiographyDocument:
        """Fetch the biography from the provider."""

    def fetch(self, person_name: str) -> BiographyDocument:
        """
        Fetch the biography text for a person.

        Raises:
            BiographyNotFoundError: Provider unreachable, misconfigured or empty.
        """
        logger.info(f"Fetching biography for {person_name}", fetcher=type(self).__name__)

        document = self._fetch_content(person_name)

        content = (document.content or "").strip()
        if not content:
            raise BiographyNotFoundError("Wikipedia returned empty content", stage="fetch_biography")

        if len(content) > self.settings.max_biography_length:
            logger.info(
                f"Truncating biography for {person_name}",
                original_length=len(content),
                max_length=self.settings.max_biography_length,
            )
            content = content[: self.settings.max_biography_length]

        document = document.model_copy(update={"content": content})
        logger.info(f"Fetched biography for {person_name}", word_count=document.word_count)
        return document


class GatewayBiographyFetcher(BiographyFetcher):
    """Fetches biographies through the serverless gateway (POST, JSON)."""

    def _fetch_content(self, person_name: str) -> BiographyDocument:
        url = self.settings.gateway_endpoint
        if not url:
            raise BiographyNotFoundError(
                "Biography gateway URL is not configured", stage="fetch_biography"
            )

        try:
            response = fetch_with_retry(
                self.session,
                "POST",
                url,
                policy=self.retry_policy,
                json={"personName": person_name},
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Biography gateway unreachable: {e}")
            raise BiographyNotFoundError(
                "Could not reach the biography service", stage="fetch_biography", cause=e
            ) from e

        if not response.ok:
            raise BiographyNotFoundError(
                f"Biography service returned status {response.status_code}",
                stage="fetch_biography",
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise BiographyNotFoundError(
                "Biography service returned an invalid response", stage="fetch_biography", cause=e
            ) from e

        if not payload.get("success") or not payload.get("content"):
            raise BiographyNotFoundError(
                payload.get("error") or "Could not find Wikipedia entry for this person",
                stage="fetch_biography",
            )

        return BiographyDocument(
            person_name=person_name,
            content=payload["content"],
            source_url=payload.get("url"),
            title=payload.get("title"),
        )


class WikipediaBiographyFetcher(BiographyFetcher):
    """Fetches the Wikipedia article page and extracts its main text."""

    def article_url(self, person_name: str) -> str:
        title = person_name.strip().replace(" ", "_")
        return f"{self.settings.wikipedia_base_url.rstrip('/')}/wiki/{quote(title)}"

    def _fetch_content(self, person_name: str) -> BiographyDocument:
        url = self.article_url(person_name)

        try:
            response = fetch_with_retry(self.session, "GET", url, policy=self.retry_policy)
        except requests.exceptions.RequestException as e:
            logger.error(f"Wikipedia unreachable for {url}: {e}")
            raise BiographyNotFoundError(
                "Could not reach Wikipedia", stage="fetch_biography", cause=e
            ) from e

        if response.status_code == 404:
            raise BiographyNotFoundError(
                f"No Wikipedia entry found for {person_name}", stage="fetch_biography"
            )
        if not response.ok:
            raise BiographyNotFoundError(
                f"Wikipedia returned status {response.status_code}", stage="fetch_biography"
            )

        extracted_json_str = trafilatura.extract(
            response.text,
            output_format="json",
            include_links=False,
            include_comments=False,
            include_tables=False,
        )
        if not extracted_json_str:
            logger.warning(f"Trafilatura failed to extract any content from {url}")
            return BiographyDocument(person_name=person_name, content="", source_url=url)

        extracted_data = json.loads(extracted_json_str)
        return BiographyDocument(
            person_name=person_name,
            content=extracted_data.get("text") or "",
            source_url=url,
            title=extracted_data.get("title"),
        )


def create_biography_fetcher(
    settings: Settings, session: Optional[requests.Session] = None
) -> BiographyFetcher:
    """Build the fetcher selected by settings.biography_source."""
    if settings.biography_source == BiographySource.WIKIPEDIA:
        return WikipediaBiographyFetcher(settings, session=session)
    return GatewayBiographyFetcher(settings, session=session)
