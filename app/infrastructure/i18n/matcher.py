"""Language matching against the ordered list of registered languages.

The first registered language (index 0) is always the default language.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.logging import get_module_logger
from infrastructure.i18n.models import UNDEFINED, Confidence, LanguageTag
from infrastructure.i18n.paths import parse_language
from infrastructure.i18n.tags import parse_tag

logger = get_module_logger()

MatchResult = Tuple[LanguageTag, int, Confidence]


def make_tags(*codes: str) -> List[LanguageTag]:
    """Convert language codes to unique tags, skipping invalid codes.

    Args:
        codes: Language codes (e.g., "en-US", "el-GR").

    Returns:
        Parsed tags in input order.
    """
    tags: List[LanguageTag] = []
    for code in codes:
        tag = parse_tag(code)
        if tag.is_undefined:
            logger.warning("invalid_language_code", code=code)
            continue
        if tag not in tags:
            tags.append(tag)
    return tags


class Matcher:
    """Matches language tags against the registered languages.

    In strict mode the list is fixed. In open mode (no languages given by the
    caller) unknown but valid tags found while loading resources are appended
    through ``match_or_add``.

    Attributes:
        languages: Registered tags; index 0 is the default language.
        strict: Whether the list of languages is fixed.
    """

    def __init__(
        self,
        languages: Optional[Sequence[LanguageTag]] = None,
        strict: Optional[bool] = None,
    ):
        """Initialize Matcher.

        Args:
            languages: Registered tags in priority order.
            strict: Fixed-list mode. Defaults to True when languages are given.
        """
        self.languages: List[LanguageTag] = []
        for tag in languages or []:
            if not tag.is_undefined and tag not in self.languages:
                self.languages.append(tag)
        self.strict = bool(self.languages) if strict is None else strict

    @classmethod
    def from_codes(cls, *codes: str) -> "Matcher":
        """Create a Matcher from textual language codes.

        An empty list of codes yields an open (non-strict) matcher.
        """
        return cls(make_tags(*codes))

    def copy(self) -> "Matcher":
        """Return an independent copy of this matcher."""
        return Matcher(list(self.languages), strict=self.strict)

    def _match_one(self, candidate: LanguageTag) -> Tuple[int, Confidence]:
        best_index, best_conf = 0, Confidence.NO
        for index, registered in enumerate(self.languages):
            conf = registered.confidence(candidate)
            if conf > best_conf:
                best_index, best_conf = index, conf
                if conf == Confidence.EXACT:
                    break
        return best_index, best_conf

    def match(self, *candidates: LanguageTag) -> MatchResult:
        """Find the best registered tag for the given candidates.

        Candidates are tried in preference order; the first one with a
        confidence above LOW wins.

        Args:
            candidates: Desired tags, most preferred first.

        Returns:
            Tuple of (matched tag, index, confidence). When nothing matches
            above LOW, the default tag at index 0 is returned with the best
            confidence seen.
        """
        if not self.languages:
            return UNDEFINED, 0, Confidence.NO

        fallback_conf = Confidence.NO
        for candidate in candidates:
            index, conf = self._match_one(candidate)
            if conf > Confidence.LOW:
                return self.languages[index], index, conf
            fallback_conf = max(fallback_conf, conf)

        return self.languages[0], 0, fallback_conf

    def match_or_add(self, candidate: LanguageTag) -> MatchResult:
        """Match a tag, registering it first if unknown in open mode.

        Args:
            candidate: Tag to match.

        Returns:
            Tuple of (tag, index, confidence). A newly registered tag is
            returned with EXACT confidence and its new index.
        """
        tag, index, conf = self.match(candidate)
        if conf <= Confidence.LOW and not self.strict and not candidate.is_undefined:
            self.languages.append(candidate)
            index = len(self.languages) - 1
            logger.info("language_registered", language=str(candidate), index=index)
            return candidate, index, Confidence.EXACT

        return tag, index, conf

    def try_match_string(self, code: Optional[str]) -> Tuple[LanguageTag, int, bool]:
        """Match a textual language code against the registered languages.

        Args:
            code: Language code to match.

        Returns:
            Tuple of (tag, index, ok). ``(UNDEFINED, -1, False)`` when the code
            does not parse or matches with a confidence of LOW or less.
        """
        tag = parse_tag(code)
        if not tag.is_undefined:
            matched, index, conf = self.match(tag)
            if conf > Confidence.LOW:
                return matched, index, True

        return UNDEFINED, -1, False

    def parse_path(self, path: str) -> int:
        """Resolve the language index a resource path belongs to.

        Returns:
            Index of the language, or -1 if the path names no usable language.
        """
        tag = parse_language(path)
        if tag is not None:
            _, index, conf = self.match_or_add(tag)
            if conf > Confidence.LOW:
                return index

        return -1

    def parse_language_files(self, file_names: Iterable[str]) -> Dict[int, List[str]]:
        """Group resource names by the index of the language they belong to.

        Names that do not resolve to a registered (or, in open mode,
        registrable) language are skipped.

        Args:
            file_names: Resource identifiers in load order.

        Returns:
            Dict mapping language index to resource names.
        """
        language_files: Dict[int, List[str]] = {}
        for file_name in file_names:
            index = self.parse_path(file_name)
            if index == -1:
                logger.debug("skipped_resource_without_language", file=file_name)
                continue
            language_files.setdefault(index, []).append(file_name)

        return language_files

    def swap_default(self, index: int) -> bool:
        """Make the language at ``index`` the default by swapping it with index 0.

        Returns:
            True if the swap was applied, False if the index is out of range.
        """
        if index < 0 or index >= len(self.languages):
            return False
        self.languages[0], self.languages[index] = (
            self.languages[index],
            self.languages[0],
        )
        return True
