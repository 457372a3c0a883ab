#!/usr/bin/env python3
"""Seed sample products through a running API, images included.

Usage:
    python scripts/seed_sample_data.py [API_URL]

Each product gets a generated solid-colour PNG so the full create path
(upload validation, image host, store) is exercised.
"""
import io
import os
import sys

import httpx
from dotenv import load_dotenv
from PIL import Image as PILImage

load_dotenv()

SAMPLE_PRODUCTS = [
    {
        "title": "Walnut Desk Organizer",
        "description": "Solid walnut tray with three compartments.",
        "status": "active",
        "date": "2025-01-12",
        "color": (120, 80, 50),
    },
    {
        "title": "Linen Table Runner",
        "description": "Stone-washed linen, 180 cm long.",
        "status": "active",
        "date": "2025-02-03",
        "color": (210, 200, 180),
    },
    {
        "title": "Ceramic Pour-Over Set",
        "description": "Dripper, carafe and two cups in matte white.",
        "status": "inactive",
        "date": "2025-02-21",
        "color": (240, 240, 235),
    },
    {
        "title": "Wool Throw Blanket",
        "description": "Merino wool throw in charcoal herringbone.",
        "status": "active",
        "date": "2025-03-08",
        "color": (60, 60, 65),
    },
    {
        "title": "Brass Bookends",
        "description": "Pair of weighted brass bookends.",
        "status": "inactive",
        "date": "2025-03-30",
        "color": (190, 150, 60),
    },
]


def make_png(color, size=(320, 240)):
    buffer = io.BytesIO()
    PILImage.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def main():
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.environ.get(
        "PRODUCT_API_URL", "http://localhost:5000"
    )

    with httpx.Client(base_url=api_url.rstrip("/"), timeout=30) as client:
        for sample in SAMPLE_PRODUCTS:
            fields = {k: v for k, v in sample.items() if k != "color"}
            slug = sample["title"].lower().replace(" ", "-")
            files = {"image": (f"{slug}.png", make_png(sample["color"]), "image/png")}

            resp = client.post("/api/Products", data=fields, files=files)
            data = resp.json()
            if not data.get("success"):
                print(f"Error creating {sample['title']}: {data.get('message')}")
                sys.exit(1)
            print(f"Created {data['product']['id']}: {sample['title']}")

    print(f"Seeded {len(SAMPLE_PRODUCTS)} products.")


if __name__ == "__main__":
    main()
