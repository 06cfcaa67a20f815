"""Loading a category tree from a JSON or YAML seed file."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import yaml
from pydantic import BaseModel, TypeAdapter
from models.category import Category
from logger import get_logger

logger = get_logger()


class SeedCategory(BaseModel):
    """One category in a seed file, with its nested children."""

    name: str
    description: Optional[str] = None
    children: List["SeedCategory"] = []


SeedCategory.model_rebuild()


_SEED_LIST = TypeAdapter(List[SeedCategory])


@dataclass
class SeedResult:
    """Counts of categories created and skipped by seed_categories()."""

    created: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.created + self.skipped


def load_seed_file(path: Path) -> List[SeedCategory]:
    """Read and validate a seed file.

    Args:
        path: A .json, .yaml or .yml file holding a list of categories.

    Returns:
        The top-level seed categories.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the extension is not supported.
        pydantic.ValidationError: If the content does not describe categories.
    """
    if not path.exists():
        raise FileNotFoundError(f"Seed file not found: {path}")

    suffix = path.suffix.lower()
    with open(path, "r") as f:
        if suffix == ".json":
            data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            raise ValueError(f"Unsupported seed file type: {path.suffix}")

    logger.info(f"Loaded seed data from {path}")
    return _SEED_LIST.validate_python(data or [])


def seed_categories(store, seeds: List[SeedCategory]) -> SeedResult:
    """Insert seed categories depth-first.

    A seed whose name already exists under the same parent is skipped, and
    the existing category becomes the parent of the seed's children, so
    seeding the same file twice creates nothing the second time.

    Args:
        store: CategoryStore to insert into.
        seeds: Top-level seed categories.

    Returns:
        SeedResult with created and skipped counts.
    """
    result = SeedResult()
    _seed_level(store, seeds, None, result)
    logger.info(f"Seeding complete: {result.created} created, {result.skipped} skipped")
    return result


def _seed_level(store, seeds, parent_key, result: SeedResult) -> None:
    if parent_key is None:
        siblings = store.get_root_categories()
    else:
        siblings = store.get_children(parent_key)
    existing = {c.name: c for c in siblings}

    for seed in seeds:
        category = existing.get(seed.name)
        if category is not None:
            logger.debug(f"Skipped '{seed.name}' (already exists)")
            result.skipped += 1
        else:
            category = store.insert(
                Category(
                    name=seed.name,
                    description=seed.description,
                    parent_key=parent_key,
                )
            )
            logger.debug(f"Created '{seed.name}' ({category.key})")
            result.created += 1
            existing[seed.name] = category

        if seed.children:
            _seed_level(store, seed.children, category.key, result)
