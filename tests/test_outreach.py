"""Tests for outreach text and display helpers."""

import pytest

from creatormatch.engine.outreach import confidence_label, first_name, format_price, generate_outreach
from creatormatch.models import Creator


@pytest.mark.parametrize("confidence,label", [(0.9, "High"), (0.75, "High"), (0.6, "Medium"),
                                              (0.55, "Medium"), (0.54, "Low"), (0.0, "Low")])
def test_confidence_label(confidence, label):
    assert confidence_label(confidence) == label


def test_first_name_takes_first_token():
    assert first_name("Mary Jane Watson") == "Mary"
    assert first_name("Cher") == "Cher"


def test_generate_outreach():
    creator = Creator(name="Ava Stone", category="Games")
    text = generate_outreach("pixelforge.com", "Games", creator)
    assert text.startswith("Hi Ava!\n\nI'm reaching out from pixelforge.com. We're in Games")
    assert "rates and availability" in text


def test_format_price():
    assert format_price(Creator(name="A", category="Games", price=120.0)) == "$120"
    assert format_price(Creator(name="A", category="Games", price=80.5)) == "$80.5"
    assert format_price(Creator(name="A", category="Games")) == "-"
