"""Catalog seeding from YAML."""
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from app.services.catalog.manager import CatalogManager
from app.services.persistence.catalog import CatalogPersistenceService

logger = logging.getLogger(__name__)

DEFAULT_SEED_FILE = Path(__file__).parent / "data" / "catalog.yaml"


def load_seed_file(seed_file: Optional[str] = None) -> Dict[str, Any]:
    """Read the seed YAML file.

    Expected layout::

        categories:
          - name: Mains
            description: ...
            items:
              - name: Burger
                price: "10.00"
                description: ...
                image_url: ...
    """
    path = Path(seed_file) if seed_file else DEFAULT_SEED_FILE
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    return data


async def seed_catalog(store: CatalogPersistenceService, seed_file: Optional[str] = None) -> int:
    """Load categories and items into an empty catalog. Returns the number of items created."""
    if await store.count_items() > 0 or await store.count_categories() > 0:
        logger.info("[SEED] Catalog already populated, skipping seed")
        return 0

    data = load_seed_file(seed_file)
    manager = CatalogManager(store)
    created = 0
    for category_data in data.get("categories", []):
        category = await manager.create_category(
            category_data["name"], category_data.get("description")
        )
        for item_data in category_data.get("items", []):
            await manager.create_item(
                name=item_data["name"],
                price=item_data["price"],
                description=item_data.get("description"),
                image_url=item_data.get("image_url"),
                category_id=category.id,
                active=item_data.get("active", True),
            )
            created += 1

    logger.info(f"[SEED] Seeded catalog with {created} items")
    return created
