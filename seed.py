"""Demo content written on first start when a collection file is missing."""

import logging

from database import ORDERS, PRODUCTS, SITE_CONFIG, RecordStore
from schemas import Product

logger = logging.getLogger(__name__)

DEFAULT_SITE = {
    "brand": "Apex Athletics",
    "hero": {
        "title": "Gear built for the long season",
        "subtitle": "Team kits, training equipment and race-day essentials.",
        "backgroundImage": "/assets/hero.svg",
        "primaryAction": {"label": "Browse products", "href": "#products"},
        "secondaryAction": {"label": "Talk to us", "href": "#consult"},
    },
    "highlights": [
        {"title": "Team pricing", "description": "Volume pricing for clubs and schools."},
        {"title": "Custom prints", "description": "Names, numbers and crests on every kit."},
        {"title": "Fast restock", "description": "Core lines ship within 48 hours."},
    ],
    "consult": {
        "title": "Planning a team order?",
        "description": "Leave your details and we will prepare a quote.",
    },
    "footer": {
        "email": "hello@apex-athletics.com",
        "phone": "+86 21 5555 0100",
        "address": "88 Harbour Road, Shanghai",
    },
}

SAMPLE_PRODUCTS = [
    {
        "id": "p1",
        "name": "Road Jersey Pro",
        "category": "Cycling",
        "price": 50,
        "description": "Breathable race-fit jersey.",
        "features": ["Mesh side panels", "Three rear pockets"],
        "inventory": 120,
        "badge": "New",
    },
    {
        "id": "p2",
        "name": "Trail Running Shoe",
        "category": "Running",
        "price": 680,
        "description": "Grippy outsole for mixed terrain.",
        "features": ["Rock plate", "4mm drop"],
        "inventory": 40,
    },
    {
        "id": "p3",
        "name": "Match Football",
        "category": "Football",
        "price": 199.5,
        "features": ["Size 5", "Thermally bonded panels"],
        "inventory": 300,
    },
]


async def seed_store(store: RecordStore) -> None:
    """Create any missing collection with demo content. Existing files are kept."""
    products = [Product.model_validate(item).model_dump() for item in SAMPLE_PRODUCTS]
    created = [
        name
        for name, default in (
            (PRODUCTS, products),
            (SITE_CONFIG, DEFAULT_SITE),
            (ORDERS, []),
        )
        if await store.ensure(name, default)
    ]
    if created:
        logger.info("Seeded collections: %s", ", ".join(created))
