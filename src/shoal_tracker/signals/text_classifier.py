"""
Text Signal Classifier
======================

Classifies unstructured text notifications by substring matching.

Rules are a prioritized list of (patterns, classification) pairs evaluated
top to bottom; the first rule with a matching pattern wins. Matching is
case-insensitive. Unmatched text is UNRELATED and ignored downstream.

Default Rules:
    1. "correct depth for the nearby"            -> CONFIRMED_DEPTH
    2. "not deep enough"                         -> INFORMATIONAL_TOO_SHALLOW
    3. "too deep"                                -> INFORMATIONAL_TOO_DEEP
    4. "closer to the surface", "shallower"      -> DEFINITIVE_SHALLOWER
    5. "deeper"                                  -> DEFINITIVE_DEEPER

Ordering matters: the informational probe messages are checked before the
generic "deeper" / "shallower" rules.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

from shoal_tracker.models.signals import TextSignalKind


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextRule:
    """One classification rule: any pattern matching selects ``kind``."""

    patterns: Tuple[str, ...]
    kind: TextSignalKind

    def matches(self, text: str) -> bool:
        return any(pattern in text for pattern in self.patterns)


DEFAULT_RULES: Tuple[TextRule, ...] = (
    TextRule(("correct depth for the nearby",), TextSignalKind.CONFIRMED_DEPTH),
    TextRule(("not deep enough",), TextSignalKind.INFORMATIONAL_TOO_SHALLOW),
    TextRule(("too deep",), TextSignalKind.INFORMATIONAL_TOO_DEEP),
    TextRule(("closer to the surface", "shallower"), TextSignalKind.DEFINITIVE_SHALLOWER),
    TextRule(("deeper",), TextSignalKind.DEFINITIVE_DEEPER),
)


class TextSignalClassifier:
    """
    Prioritized substring classifier.

    Example:
        classifier = TextSignalClassifier()
        kind = classifier.classify("The shoal swims deeper into the sea.")
        assert kind is TextSignalKind.DEFINITIVE_DEEPER
    """

    def __init__(self, rules: Optional[Sequence[TextRule]] = None) -> None:
        """
        Initialize the classifier.

        Args:
            rules: Rules in priority order (defaults if None)
        """
        source = DEFAULT_RULES if rules is None else rules
        # Patterns are lower-cased once; text is lower-cased per call
        self.rules: Tuple[TextRule, ...] = tuple(
            TextRule(tuple(p.lower() for p in rule.patterns), rule.kind)
            for rule in source
        )
        self._counts: Dict[TextSignalKind, int] = {kind: 0 for kind in TextSignalKind}

    def classify(self, text: str) -> TextSignalKind:
        """Classify one line of text."""
        normalized = text.lower()
        kind = TextSignalKind.UNRELATED
        for rule in self.rules:
            if rule.matches(normalized):
                kind = rule.kind
                break

        self._counts[kind] += 1
        if kind is not TextSignalKind.UNRELATED:
            logger.debug(f"Classified text as {kind.value}: {text!r}")
        return kind

    def classify_all(self, lines: Iterable[str]) -> Tuple[TextSignalKind, ...]:
        return tuple(self.classify(line) for line in lines)

    def get_metrics(self) -> Dict[str, int]:
        return {kind.value: count for kind, count in self._counts.items()}
