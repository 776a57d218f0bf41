"""
Naming Rules

Rule catalog used to decide which provider issued a document and which
payment method token goes into its filename. Rules are plain immutable data
built once from configuration and shared read-only by every worker.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MINIMAL_CONTENT_MAX_WORDS = 12


@dataclass(frozen=True)
class NamingRule:
    """A keyword rule mapping document content to a provider code."""
    name: str
    keywords: Tuple[str, ...]
    provider: str
    payment_method: Optional[str] = None
    forced_date: Optional[str] = None

    def __post_init__(self):
        # Keywords are compared against lowercased content
        object.__setattr__(
            self, 'keywords',
            tuple(k.strip().lower() for k in self.keywords if k and k.strip())
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NamingRule':
        """Build a rule from its settings-file representation."""
        return cls(
            name=data.get('name') or data.get('provider', ''),
            keywords=tuple(data.get('keywords') or ()),
            provider=data.get('provider', ''),
            payment_method=data.get('payment_method') or None,
            forced_date=data.get('forced_date') or None,
        )

    def matches(self, content: str) -> bool:
        """True when every keyword is a case-insensitive substring of content."""
        if not content or not content.strip():
            logger.debug(f"Rule '{self.name}' not checked - content is empty")
            return False

        if not self.keywords:
            logger.debug(f"Rule '{self.name}' not checked - no keywords defined")
            return False

        lower_content = content.lower()
        missing = [k for k in self.keywords if k not in lower_content]

        if not missing:
            logger.debug(f"Rule '{self.name}' matched keywords: {', '.join(self.keywords)}")
            return True

        if len(missing) < len(self.keywords):
            logger.debug(f"Rule '{self.name}' partially matched. Missing keywords: {', '.join(missing)}")
        return False


@dataclass(frozen=True)
class RuleSet:
    """
    Ordered collection of naming rules plus the fallback provider and payment.

    Order is priority: the first matching rule wins.
    """
    rules: Tuple[NamingRule, ...] = field(default_factory=tuple)
    default_provider: str = "servicio"
    default_payment_method: str = "santander"
    minimal_content_max_words: int = DEFAULT_MINIMAL_CONTENT_MAX_WORDS

    def __post_init__(self):
        object.__setattr__(self, 'rules', tuple(self.rules))

    @classmethod
    def from_rules(
        cls,
        rules: Iterable[NamingRule],
        default_provider: str,
        default_payment_method: str,
        minimal_content_max_words: int = DEFAULT_MINIMAL_CONTENT_MAX_WORDS
    ) -> 'RuleSet':
        rule_set = cls(
            rules=tuple(rules),
            default_provider=default_provider,
            default_payment_method=default_payment_method,
            minimal_content_max_words=minimal_content_max_words,
        )
        logger.debug(
            f"RuleSet initialized with {len(rule_set.rules)} rules, "
            f"default provider: {default_provider}, default payment: {default_payment_method}"
        )
        return rule_set

    def find_matching_rule(self, content: str) -> Optional[NamingRule]:
        """Return the first rule whose keywords all appear in content, or None."""
        if not content or not content.strip():
            logger.warning("Cannot find matching rule - content is empty")
            return None

        for rule in self.rules:
            if rule.matches(content):
                logger.debug(f"Found matching rule: '{rule.name}'")
                return rule

        logger.warning("No matching rule found for content")
        return None

    def is_minimal_content(self, content: str) -> bool:
        """Whether content is too sparse to have carried a real date."""
        if not content:
            return True
        return len(content.split()) < self.minimal_content_max_words

    def generate_filename(self, content: str, date: str) -> str:
        """
        Build the ``{provider}_{date}_{payment}`` base name for a document.

        Args:
            content: Extracted document text
            date: Date already chosen by the caller (yyyy-MM-dd)

        Returns:
            Unsanitized base name without extension
        """
        rule = self.find_matching_rule(content)

        if rule is None:
            logger.warning(
                f"No matching rule found, using defaults. Provider: {self.default_provider}, "
                f"Payment: {self.default_payment_method}"
            )
            return f"{self.default_provider}_{date}_{self.default_payment_method}"

        provider = rule.provider or self.default_provider
        payment = rule.payment_method or self.default_payment_method
        if not rule.payment_method:
            logger.debug(
                f"Rule '{rule.name}' doesn't specify a payment method, using default: {self.default_payment_method}"
            )

        effective_date = date
        if rule.forced_date and self.is_minimal_content(content):
            logger.info(f"Rule '{rule.name}' forces date {rule.forced_date} for minimal content")
            effective_date = rule.forced_date

        logger.info(f"Using rule '{rule.name}' for naming. Provider: {provider}, Payment: {payment}")
        return f"{provider}_{effective_date}_{payment}"
