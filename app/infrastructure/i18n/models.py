"""Translation models for i18n system.

Defines core data structures for language tags, match confidence, flattened
message catalogs and the language detection configuration.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Sequence


class Confidence(IntEnum):
    """How well a candidate tag matched a registered tag.

    Only a confidence strictly greater than LOW counts as a usable match.
    """

    NO = 0
    LOW = 1
    HIGH = 2
    EXACT = 3


@dataclass(frozen=True)
class LanguageTag:
    """Normalized IETF BCP 47 language tag (e.g., en-US, zh-Hans-CN).

    Two tags are equal iff all of their normalized subtags are equal.
    Frozen to ensure immutability and hashability for caching.

    Attributes:
        language: Lowercase base language subtag (e.g., "en").
        script: Title-case script subtag (e.g., "Hans"), if any.
        territory: Uppercase region subtag (e.g., "US"), if any.
        variant: Uppercase variant subtag, if any.
    """

    language: str
    script: Optional[str] = None
    territory: Optional[str] = None
    variant: Optional[str] = None

    def __str__(self) -> str:
        """Return the BCP 47 form of the tag.

        Returns:
            Hyphen-separated tag (e.g., "en-US").
        """
        parts = [self.language, self.script, self.territory, self.variant]
        return "-".join(part for part in parts if part)

    @property
    def is_undefined(self) -> bool:
        """Whether this is the "und" sentinel tag."""
        return self.language == "und"

    @property
    def base(self) -> "LanguageTag":
        """Get the language-only tag (e.g., "en" from "en-US")."""
        return LanguageTag(self.language)

    def confidence(self, other: "LanguageTag") -> Confidence:
        """Score how well ``other`` matches this tag.

        Args:
            other: Tag to compare against.

        Returns:
            EXACT for identical tags, HIGH for the same language with a
            compatible script, LOW when only the scripts conflict, NO otherwise.
        """
        if self.is_undefined or other.is_undefined:
            return Confidence.NO
        if self == other:
            return Confidence.EXACT
        if self.language != other.language:
            return Confidence.NO
        if self.script and other.script and self.script != other.script:
            return Confidence.LOW
        return Confidence.HIGH


UNDEFINED = LanguageTag("und")


@dataclass
class TranslationCatalog:
    """Flattened message table for a single language.

    Keys are dot-joined paths of the nested source data
    (e.g., "cart.checkout"); values are raw printf-style or template-style
    message strings.

    Attributes:
        tag: The LanguageTag this catalog is for.
        messages: Flat dict {dotted_key: raw_message}.
        sources: Identifiers of the source fragments merged into the catalog.
        loaded_at: Timestamp (ISO 8601) when the catalog was built.
    """

    tag: LanguageTag
    messages: Dict[str, str] = field(default_factory=dict)
    sources: List[str] = field(default_factory=list)
    loaded_at: Optional[str] = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def get_message(self, key: str) -> Optional[str]:
        """Retrieve a raw message by dotted key.

        Args:
            key: Dotted message key.

        Returns:
            Raw message string, or None if not found.
        """
        return self.messages.get(key)

    def set_message(self, key: str, message: str) -> None:
        """Set a raw message.

        Args:
            key: Dotted message key.
            message: Raw message string.
        """
        self.messages[key] = message

    def has_message(self, key: str) -> bool:
        """Check if a message exists for the given key.

        Args:
            key: Dotted message key.

        Returns:
            True if message exists, False otherwise.
        """
        return key in self.messages

    def merge(self, other: "TranslationCatalog") -> None:
        """Overlay another catalog onto this one.

        Later entries override earlier ones key by key.

        Args:
            other: TranslationCatalog to merge.
        """
        self.messages.update(other.messages)
        self.sources.extend(other.sources)


DefaultMessageFunc = Callable[[str, str, str, Sequence[Any]], str]


@dataclass(frozen=True)
class ResolutionConfig:
    """Language detection and fallback configuration.

    Every signal is optional; unset signals are skipped during detection.
    Read-only after construction, use ``with_options`` to derive a variant.

    Attributes:
        context_key: Request-scoped storage key holding an already detected
            language. Also filled by the router rewrite.
        extract_func: Custom hook returning a language code for a request.
        url_parameter: Query parameter carrying a language code.
        cookie: Cookie carrying a language code.
        subdomain: Whether the first host label may carry a language code.
        strict: Disable the fallback to the default language for missing keys.
        default_message: Hook called as
            ``(requested_code, matched_code, key, args)`` when no text was found.
    """

    context_key: Optional[str] = None
    extract_func: Optional[Callable[[Any], str]] = None
    url_parameter: Optional[str] = None
    cookie: Optional[str] = None
    subdomain: bool = False
    strict: bool = False
    default_message: Optional[DefaultMessageFunc] = None

    def with_options(self, **changes: Any) -> "ResolutionConfig":
        """Return a copy of this configuration with ``changes`` applied."""
        return replace(self, **changes)
