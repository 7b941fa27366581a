#!/usr/bin/env python3
"""
seed_data.py

Generates a fake two-way radio catalog to CSVs under a local folder (default: sample_data),
in the shape the CSV backend reads.

Entities:
- categories (one level of subcategories), brands, products

Run:
  python -m mundolar.seed_data --products 48
"""

from __future__ import annotations
import argparse
import csv
import json
import os
import random
import string
import sys
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from mundolar.config import get_config

# -----------------------------
# Catalog vocabulary
# -----------------------------

# top-level category -> subcategories
CATEGORIES: Dict[str, List[str]] = {
    "Radios Portátiles": ["Radios Análogos", "Radios Digitales"],
    "Radios Móviles": [],
    "Repuestos & Baterías": ["Baterías", "Antenas"],
    "Accesorios": ["Micrófonos", "Cargadores", "Audífonos"],
}

BRANDS = ["Motorola Solutions", "Hytera", "Kenwood", "Icom"]

MODEL_PREFIX = {
    "Motorola Solutions": ["DEP", "DGP", "SL", "R"],
    "Hytera": ["HP", "BD", "PD", "MD"],
    "Kenwood": ["NX", "TK", "TH"],
    "Icom": ["IC-F", "IC-M", "ID"],
}

# category name -> (min, max) pre-tax price in COP
PRICE_RANGES = {
    "Radios Portátiles": (450_000, 3_500_000),
    "Radios Análogos": (350_000, 1_200_000),
    "Radios Digitales": (900_000, 4_500_000),
    "Radios Móviles": (1_200_000, 6_000_000),
    "Repuestos & Baterías": (40_000, 400_000),
    "Baterías": (90_000, 450_000),
    "Antenas": (30_000, 250_000),
    "Accesorios": (25_000, 300_000),
    "Micrófonos": (120_000, 600_000),
    "Cargadores": (80_000, 500_000),
    "Audífonos": (45_000, 350_000),
}

OFFER_RATE = 0.2
INACTIVE_RATE = 0.05


# -----------------------------
# Utility functions
# -----------------------------

def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)

def rand_sku() -> str:
    return "MU-" + "".join(random.choices(string.ascii_uppercase + string.digits, k=6))

def price_round(p: float) -> int:
    """Pre-tax prices are whole pesos rounded to the hundred."""
    return int(round(max(p, 100) / 100.0) * 100)

def image_urls(product_id: int, n: int) -> str:
    return json.dumps([f"https://picsum.photos/seed/mundolar-{product_id}-{i}/800/600" for i in range(n)])


# -----------------------------
# Core generators
# -----------------------------

def gen_categories() -> List[Dict]:
    rows: List[Dict] = []
    next_id = 1
    for position, (name, children) in enumerate(CATEGORIES.items(), start=1):
        parent_id = next_id
        rows.append({
            "id": parent_id,
            "name": name,
            "description": f"Catálogo de {name.lower()}",
            "image_url": f"https://picsum.photos/seed/categoria-{parent_id}/600/400",
            "parent_id": None,
            "status": "Activo",
            "position": position,
        })
        next_id += 1
        for child_pos, child in enumerate(children, start=1):
            rows.append({
                "id": next_id,
                "name": child,
                "description": None,
                "image_url": None,
                "parent_id": parent_id,
                "status": "Activo",
                "position": child_pos,
            })
            next_id += 1
    return rows

def gen_brands() -> List[Dict]:
    return [
        {
            "id": i,
            "name": name,
            "image_url": f"https://picsum.photos/seed/marca-{i}/300/150",
            "status": "Activo",
            "position": i,
        }
        for i, name in enumerate(BRANDS, start=1)
    ]

def gen_products(n: int, categories: List[Dict], brands: List[Dict]) -> List[Dict]:
    now = datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None)
    products = []
    for product_id in range(1, n + 1):
        category = random.choice(categories)
        brand = random.choice(brands)
        low, high = PRICE_RANGES.get(category["name"], (50_000, 1_000_000))
        price = price_round(random.uniform(low, high))

        original_price = None
        if random.random() < OFFER_RATE:
            original_price = price_round(price * random.uniform(1.08, 1.35))

        model = f"{random.choice(MODEL_PREFIX[brand['name']])}{random.randint(100, 9999)}"
        created = now - timedelta(days=random.randint(0, 365), minutes=random.randint(0, 1440))
        products.append({
            "id": product_id,
            "name": f"{category['name'].split(' ')[0]} {brand['name'].split(' ')[0]} {model}",
            "description": f"{brand['name']} {model}. Equipo de comunicación profesional con garantía.",
            "price": price,
            "original_price": original_price,
            # left empty so the storefront computes the IVA amount
            "price_with_iva": None,
            "image_urls": image_urls(product_id, random.randint(1, 3)),
            "category_id": category["id"],
            "brand_id": brand["id"],
            "status": "Inactivo" if random.random() < INACTIVE_RATE else "Activo",
            "sku": rand_sku(),
            "created_at": created.isoformat(timespec="seconds"),
        })
    return products


# -----------------------------
# CSV writer
# -----------------------------

def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers)
        w.writeheader()
        for r in rows:
            w.writerow(r)


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Generate a fake radio equipment catalog to CSVs.")
    parser.add_argument("--products", type=int, default=config.default_seed_products)
    parser.add_argument("--output-dir", type=str, default=config.data_dir)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    random.seed(args.seed)

    outdir = args.output_dir
    ensure_dir(outdir)

    files = {
        "categories": os.path.join(outdir, "categories.csv"),
        "brands": os.path.join(outdir, "brands.csv"),
        "products": os.path.join(outdir, "products.csv"),
    }
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    categories = gen_categories()
    brands = gen_brands()
    products = gen_products(args.products, categories, brands)

    write_csv(files["categories"], categories,
              ["id", "name", "description", "image_url", "parent_id", "status", "position"])
    write_csv(files["brands"], brands,
              ["id", "name", "image_url", "status", "position"])
    write_csv(files["products"], products,
              ["id", "name", "description", "price", "original_price", "price_with_iva",
               "image_urls", "category_id", "brand_id", "status", "sku", "created_at"])

    print(f"Generated data in {outdir}")
    print(f" categories: {len(categories)} | brands: {len(brands)} | products: {len(products)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
