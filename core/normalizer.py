"""Dialed number normalization.

Runs a dialed number through the ordered translation rules of a dial plan.
The first rule that matches is applied and evaluation stops there.
"""

__all__ = [
    "NumberNormalizer",
]

import logging

from core.models import DialPlan, NormalizationResult
from core.patterns import compile_pattern, expand_replacement

logger = logging.getLogger(__name__)


class NumberNormalizer:
    """Applies dial plan translation rules to dialed numbers."""

    def normalize(self, dialed_number: str, plan: DialPlan) -> NormalizationResult:
        """Normalize a dialed number.

        Args:
            dialed_number: Number as dialed by the caller.
            plan: Dial plan effective for the caller.

        Returns:
            NormalizationResult with the translated number and the rule that
            produced it, or the untouched number and no rule.

        Raises:
            InvalidPattern: If any rule in the plan has an invalid pattern.
        """
        # Validate the whole plan up front so a bad rule is reported no
        # matter which number is dialed.
        compiled = [
            (rule, compile_pattern(rule.pattern, f"translation rule {rule.name or rule.order} of {plan.name}"))
            for rule in plan.rules
        ]

        for rule, regex in compiled:
            if regex.search(dialed_number) is None:
                continue

            normalized = regex.sub(lambda m: expand_replacement(m, rule.replacement), dialed_number)
            logger.debug(
                f"Dial plan {plan.name}: rule {rule.name or rule.order} translated {dialed_number} -> {normalized}"
            )
            return NormalizationResult(dialed_number=dialed_number, normalized=normalized, matched_rule=rule)

        logger.debug(f"Dial plan {plan.name}: no rule matched {dialed_number}")
        return NormalizationResult(dialed_number=dialed_number, normalized=dialed_number)
