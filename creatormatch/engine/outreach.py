"""
Creator Match - Outreach Text
Renders the message a brand copies to contact its matched creator.
Short, friendly, asks for rates and availability.
"""
from creatormatch.config import HIGH_CONFIDENCE_THRESHOLD, LOW_CONFIDENCE_THRESHOLD
from creatormatch.models import Creator

OUTREACH_TEMPLATE = """Hi {creator_first_name}!

I'm reaching out from {brand_host}. We're in {category} and I think your audience is a strong fit.
Would you be open to a quick collaboration idea?

If yes, what are your rates and availability for the next 2 weeks?

Thanks!
-"""


def confidence_label(confidence: float) -> str:
    if confidence >= HIGH_CONFIDENCE_THRESHOLD:
        return "High"
    if confidence >= LOW_CONFIDENCE_THRESHOLD:
        return "Medium"
    return "Low"


def first_name(name: str) -> str:
    return name.split(" ")[0]


def generate_outreach(brand_host: str, category: str, creator: Creator) -> str:
    return OUTREACH_TEMPLATE.format(
        creator_first_name=first_name(creator.name),
        brand_host=brand_host,
        category=category,
    )


def format_price(creator: Creator) -> str:
    """'$9.99' for display, '-' when the sheet had no usable price."""
    if creator.price is None:
        return "-"
    price = int(creator.price) if creator.price.is_integer() else creator.price
    return f"${price}"
