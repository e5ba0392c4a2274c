"""Category identification by keyword matching."""

import logging
from collections.abc import Iterable, Mapping

from .normalize import normalize

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 3


def matching_categories(
    normalized_text: str,
    keyword_map: Mapping[str, Iterable[str]],
) -> list[str]:
    """Return categories with at least one keyword found in the text.

    Order follows the keyword map. Keywords shorter than three characters
    after normalization never match.
    """
    if not normalized_text:
        return []

    matches = []
    for category, keywords in keyword_map.items():
        for keyword in keywords:
            needle = normalize(keyword)
            if len(needle) < MIN_KEYWORD_LENGTH:
                continue
            if needle in normalized_text:
                matches.append(category)
                break
    return matches


def identify_category(
    normalized_text: str,
    keyword_map: Mapping[str, Iterable[str]],
    priority_categories: Iterable[str] = (),
) -> str | None:
    """Pick the single category a document belongs to, or None.

    More than one match is resolved through the priority list, in priority
    order. Ambiguous matches with no prioritized category are rejected.
    """
    matches = matching_categories(normalized_text, keyword_map)

    if not matches:
        return None
    if len(matches) == 1:
        return matches[0]

    for category in priority_categories:
        if category in matches:
            logger.debug(f"Ambiguous match {matches}, prioritized: {category}")
            return category

    logger.debug(f"Ambiguous match {matches}, no priority category")
    return None
