"""Language inference from resource identifiers.

Resource files name their language somewhere in their path, e.g.
``locales/el-GR/cart.yml``, ``cart.el-GR.yml`` or ``cart_el-GR.json``.
"""

import os
import re
from typing import List, Optional

from infrastructure.i18n.models import LanguageTag
from infrastructure.i18n.tags import parse_tag

_SEGMENT_SEPARATORS = re.compile(r"[\\/_.]")


def path_segments(path: str) -> List[str]:
    """Split a path, without its final extension, into candidate segments.

    Args:
        path: File path or logical resource name.

    Returns:
        Non-empty segments split on path separators, underscores and dots.
    """
    stem, _ = os.path.splitext(path)
    return [segment for segment in _SEGMENT_SEPARATORS.split(stem) if segment]


def parse_language(path: str) -> Optional[LanguageTag]:
    """Infer the language a resource belongs to from its path.

    Segments are scanned from the one nearest the extension towards the root,
    so a language suffix on the file wins over an ancestor directory whose
    name happens to be a valid language code.

    Args:
        path: File path or logical resource name.

    Returns:
        The first segment (rightmost) that parses as a language tag, or None.
    """
    for segment in reversed(path_segments(path)):
        tag = parse_tag(segment)
        if not tag.is_undefined:
            return tag

    return None
