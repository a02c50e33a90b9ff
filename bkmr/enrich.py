"""
Fetch title and description of a web page to fill in new bookmarks.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from bs4 import BeautifulSoup

from bkmr.config import BkmrConfig

logger = logging.getLogger(__name__)


@dataclass
class UrlDetails:
    title: str = ""
    description: str = ""


def _meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return tag["content"].strip()
    return None


def parse_details(html) -> UrlDetails:
    """
    Extract title and description from an HTML document.

    The description comes from ``<meta name="description">`` and falls
    back to ``<meta property="og:description">``.
    """
    soup = BeautifulSoup(html, "html.parser")
    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""
    description = (
        _meta_content(soup, name="description")
        or _meta_content(soup, property="og:description")
        or ""
    )
    return UrlDetails(title=title, description=description)


def fetch_url_details(url: str, config: Optional[BkmrConfig] = None) -> UrlDetails:
    """
    Fetch a URL and extract its title and description.

    Raises:
        requests.RequestException: network failure or HTTP error status
    """
    config = config or BkmrConfig()
    response = requests.get(
        url,
        timeout=config.timeout,
        headers={"User-Agent": config.user_agent},
        verify=config.verify_ssl,
    )
    response.raise_for_status()
    details = parse_details(response.content)
    logger.debug("Fetched %s: %s", url, details)
    return details
