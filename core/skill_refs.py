"""Skill references embedded in structure content."""

from __future__ import annotations

from html import unescape
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup

CONCEPT_CARD_TAG = "oppia-noninteractive-skillreview"
SKILL_ID_ATTRIBUTE_NAME = "skill_id-with-value"


def _decode_attribute(raw: Optional[str]) -> str:
    # Attribute values are JSON strings escaped into HTML, e.g. "&amp;quot;skill_1&amp;quot;".
    if not raw:
        return ""
    return unescape(raw).strip().strip('"').strip()


def extract_skill_ids(html: str) -> List[str]:
    """Return the skill IDs of every concept card tag in ``html``, in document order."""
    if not html:
        return []
    soup = BeautifulSoup(html, "lxml")
    skill_ids: List[str] = []
    for tag in soup.find_all(CONCEPT_CARD_TAG):
        skill_id = _decode_attribute(tag.get(SKILL_ID_ATTRIBUTE_NAME))
        if skill_id and skill_id not in skill_ids:
            skill_ids.append(skill_id)
    return skill_ids


def extract_all_skill_ids(fragments: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(skill_id for html in fragments for skill_id in extract_skill_ids(html)))


def collect_skill_ids(structure) -> List[str]:
    """
    Every skill a structure references.

    Works for any structure exposing ``html_fragments()`` and
    ``directly_referenced_skill_ids()``: concept cards embedded in its rich
    text come first, then the IDs it names directly.
    """
    embedded = extract_all_skill_ids(structure.html_fragments())
    return list(dict.fromkeys(embedded + list(structure.directly_referenced_skill_ids())))
