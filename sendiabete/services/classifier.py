"""
Glycemia classification.

Readings are in grams per liter. Band boundaries:

    value <  0.70          severe_hypoglycemia
    0.70 <= value < 1.00   hypoglycemia
    1.00 <= value <= 1.26  normal
    1.26 <  value <= 1.40  moderate_hyperglycemia
    value >  1.40          severe_hyperglycemia

Negative values are not rejected; they fall in severe_hypoglycemia.
"""

from decimal import Decimal
from enum import Enum


class SeverityBand(str, Enum):
    SEVERE_HYPOGLYCEMIA = "severe_hypoglycemia"
    HYPOGLYCEMIA = "hypoglycemia"
    NORMAL = "normal"
    MODERATE_HYPERGLYCEMIA = "moderate_hyperglycemia"
    SEVERE_HYPERGLYCEMIA = "severe_hyperglycemia"


SEVERE_HYPO_BELOW = Decimal("0.70")
HYPO_BELOW = Decimal("1.00")
NORMAL_UP_TO = Decimal("1.26")
MODERATE_HYPER_UP_TO = Decimal("1.40")

URGENT_MARKER = "URGENT"

MESSAGE_TEMPLATES: dict[SeverityBand, str] = {
    SeverityBand.SEVERE_HYPOGLYCEMIA: "🚨 " + URGENT_MARKER + " - Glycémie {value:f}g/L. Hypoglycémie sévère. Contactez votre médecin.",
    SeverityBand.HYPOGLYCEMIA: "⚠️ Glycémie {value:f}g/L (hypo). Prenez du sucre.",
    SeverityBand.NORMAL: "✅ Glycémie {value:f}g/L - Excellent ! Continuez.",
    SeverityBand.MODERATE_HYPERGLYCEMIA: "📈 Glycémie {value:f}g/L (élevée). Surveillez votre alimentation.",
    SeverityBand.SEVERE_HYPERGLYCEMIA: "🚨 Glycémie {value:f}g/L (très élevée). Contactez votre médecin.",
}


def classify(value: Decimal) -> SeverityBand:
    if value < SEVERE_HYPO_BELOW:
        return SeverityBand.SEVERE_HYPOGLYCEMIA
    if value < HYPO_BELOW:
        return SeverityBand.HYPOGLYCEMIA
    if value <= NORMAL_UP_TO:
        return SeverityBand.NORMAL
    if value <= MODERATE_HYPER_UP_TO:
        return SeverityBand.MODERATE_HYPERGLYCEMIA
    return SeverityBand.SEVERE_HYPERGLYCEMIA


def render_message(band: SeverityBand, value: Decimal) -> str:
    """Patient-facing notification text for ``band``, embedding ``value``."""
    return MESSAGE_TEMPLATES[SeverityBand(band)].format(value=value)
