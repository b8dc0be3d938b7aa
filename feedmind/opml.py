"""OPML import/export for the subscription list."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from .errors import ValidationError
from .models import Feed


@dataclass
class OPMLFeed:
    """A feed outline from an OPML file."""
    url: str
    title: str | None


def parse_opml(xml_content: str) -> list[OPMLFeed]:
    """
    Extract feed outlines from OPML.

    Folder outlines are flattened; feeds keep document order.

    Raises:
        ValidationError: If the content is not well-formed OPML
    """
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        raise ValidationError(f"Invalid OPML: {e}")

    if root.tag.lower() != "opml":
        raise ValidationError(f"Invalid OPML: root element is <{root.tag}>")

    body = root.find("body")
    if body is None:
        raise ValidationError("Invalid OPML: missing <body> element")

    feeds: list[OPMLFeed] = []
    for outline in body.iter("outline"):
        xml_url = outline.get("xmlUrl") or outline.get("xmlurl")
        if not xml_url:
            continue
        title = outline.get("title") or outline.get("text")
        feeds.append(OPMLFeed(
            url=xml_url.strip(),
            title=title.strip() if title else None,
        ))
    return feeds


def generate_opml(feeds: list[Feed], title: str = "FeedMind Subscriptions") -> str:
    """Render feeds as an OPML 2.0 document."""
    root = ET.Element("opml", version="2.0")
    head = ET.SubElement(root, "head")
    ET.SubElement(head, "title").text = title

    body = ET.SubElement(root, "body")
    for feed in feeds:
        ET.SubElement(
            body,
            "outline",
            type="rss",
            text=feed.title,
            title=feed.title,
            xmlUrl=feed.url,
        )

    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(
        root, encoding="unicode"
    )
