"""Language tag parsing.

Codes are split into subtags with Babel and the language subtag is validated
against the CLDR locale data shipped with Babel, so only known languages
parse. Script, territory and variant are kept as given, even for pairs CLDR
has no data for ("de-US"). Anything else becomes the UNDEFINED tag; parsing
never raises.
"""

import functools
from typing import List, Optional

from babel import Locale as BabelLocale
from babel import UnknownLocaleError
from babel.core import parse_locale

from infrastructure.i18n.models import UNDEFINED, LanguageTag


@functools.lru_cache(maxsize=256)
def _is_known_language(language: str) -> bool:
    try:
        BabelLocale.parse(language, resolve_likely_subtags=False)
    except (ValueError, TypeError, UnknownLocaleError):
        return False
    return True


@functools.lru_cache(maxsize=1024)
def parse_tag(code: Optional[str]) -> LanguageTag:
    """Parse a textual language code into a LanguageTag.

    Accepts BCP 47 ("en-US") and POSIX ("en_US") separators, any letter case.
    Subtags are never rewritten: "en-ZZ" stays en-ZZ and "el-US" stays el-US.

    Args:
        code: Language code to parse.

    Returns:
        Parsed LanguageTag, or UNDEFINED if the code is empty, malformed or
        names an unknown language.
    """
    if not code or not isinstance(code, str):
        return UNDEFINED

    code = code.strip().replace("_", "-")
    if not code or code == "*":
        return UNDEFINED

    try:
        language, territory, script, variant = parse_locale(code, sep="-")[:4]
    except (ValueError, TypeError):
        return UNDEFINED

    # CLDR "root" holds inherited defaults, it names no language.
    if language in ("root", "und") or not _is_known_language(language):
        return UNDEFINED

    return LanguageTag(
        language=language,
        script=script,
        territory=territory,
        variant=variant,
    )


def parse_accept_language(header: Optional[str]) -> List[LanguageTag]:
    """Parse an Accept-Language header into tags in preference order.

    "en-US,en;q=0.9,fr-FR;q=0.8" -> [en-US, en, fr-FR]. Entries with q=0 or
    a malformed quality are dropped, wildcards and unknown ranges are skipped.

    Args:
        header: Accept-Language header value.

    Returns:
        Parsed tags sorted by quality (descending, stable).
    """
    if not header:
        return []

    preferences = []
    for part in header.split(","):
        lang_range = part.split(";")[0].strip()
        if not lang_range:
            continue

        quality = 1.0
        if ";" in part and "q=" in part:
            try:
                quality = float(part.split("q=")[1].split(";")[0])
            except ValueError:
                continue

        if quality <= 0:
            continue

        tag = parse_tag(lang_range)
        if not tag.is_undefined:
            preferences.append((tag, quality))

    return [tag for tag, _ in sorted(preferences, key=lambda x: x[1], reverse=True)]
