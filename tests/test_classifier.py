from decimal import Decimal

import pytest

from sendiabete.services.classifier import URGENT_MARKER, SeverityBand, classify, render_message


@pytest.mark.parametrize(
    "value, band",
    [
        ("0.69", SeverityBand.SEVERE_HYPOGLYCEMIA),
        ("0.70", SeverityBand.HYPOGLYCEMIA),
        ("0.99", SeverityBand.HYPOGLYCEMIA),
        ("1.00", SeverityBand.NORMAL),
        ("1.26", SeverityBand.NORMAL),
        ("1.27", SeverityBand.MODERATE_HYPERGLYCEMIA),
        ("1.40", SeverityBand.MODERATE_HYPERGLYCEMIA),
        ("1.41", SeverityBand.SEVERE_HYPERGLYCEMIA),
    ],
)
def test_band_boundaries(value, band):
    assert classify(Decimal(value)) == band


def test_boundaries_are_exact():
    # no rounding: just above 1.26 is already moderate
    assert classify(Decimal("1.2600001")) == SeverityBand.MODERATE_HYPERGLYCEMIA
    assert classify(Decimal("0.6999")) == SeverityBand.SEVERE_HYPOGLYCEMIA


def test_negative_and_huge_values_are_classified():
    assert classify(Decimal("-3")) == SeverityBand.SEVERE_HYPOGLYCEMIA
    assert classify(Decimal("0")) == SeverityBand.SEVERE_HYPOGLYCEMIA
    assert classify(Decimal("42")) == SeverityBand.SEVERE_HYPERGLYCEMIA


@pytest.mark.parametrize("band", list(SeverityBand))
def test_every_band_has_a_message_embedding_the_value(band):
    text = render_message(band, Decimal("1.23"))
    assert "1.23" in text
    assert text == render_message(band, Decimal("1.23"))


def test_urgent_marker_only_on_severe_hypoglycemia():
    value = Decimal("0.5")
    urgent = render_message(SeverityBand.SEVERE_HYPOGLYCEMIA, value)
    assert URGENT_MARKER in urgent
    for band in SeverityBand:
        if band is not SeverityBand.SEVERE_HYPOGLYCEMIA:
            assert URGENT_MARKER not in render_message(band, value)


def test_messages_differ_per_band():
    texts = {render_message(band, Decimal("1.00")) for band in SeverityBand}
    assert len(texts) == len(SeverityBand)


def test_band_accepts_plain_string_value():
    assert render_message("normal", Decimal("1.1")) == render_message(SeverityBand.NORMAL, Decimal("1.1"))


def test_message_uses_plain_notation():
    text = render_message(SeverityBand.SEVERE_HYPERGLYCEMIA, Decimal("1E+1"))
    assert "10g/L" in text
    assert "E+" not in text
    assert "1.20g/L" in render_message(SeverityBand.NORMAL, Decimal("1.20"))
