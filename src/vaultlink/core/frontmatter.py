"""YAML frontmatter block: split a note into (mapping, body) and join them back"""

import logging
import re
from typing import Any

import yaml


logger = logging.getLogger(__name__)

# Opening line, lazily-matched YAML, closing line; the closing line's own newline is consumed if present.
FRONTMATTER_RE = re.compile(r'^---\n(.*?)\n---(?:\n|\Z)', re.DOTALL)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) for a note's raw content.

    Content without a leading block yields ({}, content). A block whose YAML is
    malformed or not a mapping yields an empty dict; the body is still split off.
    """
    m = FRONTMATTER_RE.match(content)
    if not m:
        return {}, content
    try:
        fm = yaml.safe_load(m.group(1))
    except yaml.YAMLError as e:
        logger.warning("Discarding malformed frontmatter: %s", e)
        fm = {}
    if not isinstance(fm, dict):
        if fm is not None:
            logger.warning("Discarding frontmatter: expected a mapping, got %s", type(fm).__name__)
        fm = {}
    return dict(fm), content[m.end():]


def serialize_frontmatter(frontmatter: dict[str, Any], body: str) -> str:
    """Render a frontmatter block followed by body.

    Exactly one newline separates the closing delimiter from the body, so an empty
    body still ends the file with a newline and parse_frontmatter returns body unchanged.
    """
    fm_text = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True).rstrip()
    return f"---\n{fm_text}\n---\n{body}"
