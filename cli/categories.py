#!/usr/bin/env python3

import sys
from pathlib import Path
from exceptions import CanopyError
from models.category import Category
from services.seed import load_seed_file, seed_categories
from logger import get_logger

logger = get_logger()


def _walk(cache, keys, depth=0):
    """Yield (depth, category) pairs depth-first in display order."""
    for key in keys:
        category = cache.get_category(key)
        if category is None:
            continue
        yield depth, category
        yield from _walk(cache, cache.children_of(key) or (), depth + 1)


def cmd_tree(args, services):
    """Print the category hierarchy."""
    cache = services.tree()

    if not cache.root_keys():
        logger.info("No categories found.")
        return

    for depth, category in _walk(cache, cache.root_keys()):
        marker = "+" if cache.has_children(category.key) else "-"
        logger.info(f"{'  ' * depth}{marker} {category.name} [{category.key}]")


def cmd_list(args, services):
    """List all categories with their details."""
    cache = services.tree()
    categories = [category for _, category in _walk(cache, cache.root_keys())]

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"Key: {category.key}")
        logger.info(f"Name: {category.name}")
        if category.description:
            logger.info(f"Description: {category.description}")
        if category.parent_key:
            parent = cache.get_category(category.parent_key)
            parent_name = parent.name if parent else "Unknown"
            logger.info(f"Parent: {parent_name} ({category.parent_key})")
        logger.info("-" * 80)

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_show(args, services):
    """Show one category, its path and its children."""
    category = services.categories.find(args.key)
    if category is None:
        logger.error(f"Category {args.key} not found.")
        sys.exit(1)

    path = [c.name for c in reversed(services.categories.ancestors(category.key))]
    path.append(category.name)

    logger.info(f"Key: {category.key}")
    logger.info(f"Name: {category.name}")
    logger.info(f"Path: {' / '.join(path)}")
    if category.description:
        logger.info(f"Description: {category.description}")
    logger.info(f"Version: {category.version}")

    children = services.categories.get_children(category.key)
    logger.info(f"Children: {len(children)}")
    for child in children:
        logger.info(f"  - {child.name} [{child.key}]")


def cmd_create(args, services):
    """Create a new category."""
    category = Category(
        name=args.name.strip(),
        description=args.description,
        parent_key=args.parent,
    )
    try:
        services.categories.insert(category)
    except (CanopyError, ValueError) as e:
        logger.error(f"Error creating category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category created with key: {category.key}")
    logger.info(f"  Name: {category.name}")
    if category.parent_key:
        logger.info(f"  Parent: {category.parent_key}")


def cmd_update(args, services):
    """Rename, redescribe or move a category."""
    category = services.categories.find(args.key)
    if category is None:
        logger.error(f"Category {args.key} not found.")
        sys.exit(1)

    if args.name is not None:
        category.name = args.name.strip()
    if args.description is not None:
        category.description = args.description or None
    if args.root:
        category.parent_key = None
    elif args.parent is not None:
        category.parent_key = args.parent

    try:
        services.categories.update(category)
    except (CanopyError, ValueError) as e:
        logger.error(f"Error updating category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category '{category.name}' updated (version {category.version}).")


def cmd_delete(args, services):
    """Delete a category; its children move up to its parent."""
    category = services.categories.find(args.key)
    if category is None:
        logger.error(f"Category {args.key} not found.")
        sys.exit(1)

    children = services.categories.get_children(category.key)
    logger.info("\nCategory to delete:")
    logger.info(f"  Key: {category.key}")
    logger.info(f"  Name: {category.name}")
    if children:
        logger.info(f"  {len(children)} child categories will move up one level")

    if not args.yes:
        confirm = (
            input("\nAre you sure you want to delete this category? (yes/no): ")
            .strip()
            .lower()
        )
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    try:
        services.categories.delete(category)
    except CanopyError as e:
        logger.error(f"Error deleting category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category '{category.name}' deleted successfully.")


def cmd_seed(args, services):
    """Seed categories from a JSON or YAML file."""
    seed_file = Path(args.file) if args.file else services.config.seed_file

    try:
        seeds = load_seed_file(seed_file)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"\nSeeding categories from {seed_file}")
    logger.info("=" * 80)
    result = seed_categories(services.categories, seeds)
    logger.info(f"Created: {result.created}")
    logger.info(f"Skipped: {result.skipped}")
    logger.info(f"Total: {result.total}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Browse, create, update, move and delete categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    tree_parser = categories_subparsers.add_parser(
        "tree", help="Print the category hierarchy"
    )
    tree_parser.set_defaults(func=cmd_tree)

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    show_parser = categories_subparsers.add_parser("show", help="Show one category")
    show_parser.add_argument("key", help="Key of the category")
    show_parser.set_defaults(func=cmd_show)

    create_parser = categories_subparsers.add_parser(
        "create", help="Create a new category"
    )
    create_parser.add_argument("name", help="Category name")
    create_parser.add_argument("--description", help="Optional description")
    create_parser.add_argument("--parent", help="Key of the parent category")
    create_parser.set_defaults(func=cmd_create)

    update_parser = categories_subparsers.add_parser(
        "update", help="Update or move a category"
    )
    update_parser.add_argument("key", help="Key of the category")
    update_parser.add_argument("--name", help="New name")
    update_parser.add_argument(
        "--description", help="New description (empty string clears it)"
    )
    placement = update_parser.add_mutually_exclusive_group()
    placement.add_argument("--parent", help="Key of the new parent category")
    placement.add_argument(
        "--root", action="store_true", help="Make the category a root"
    )
    update_parser.set_defaults(func=cmd_update)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by key"
    )
    delete_parser.add_argument("key", help="Key of the category to delete")
    delete_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)

    seed_parser = categories_subparsers.add_parser(
        "seed", help="Seed categories from a JSON or YAML file"
    )
    seed_parser.add_argument(
        "file", nargs="?", help="Seed file (defaults to the configured seed file)"
    )
    seed_parser.set_defaults(func=cmd_seed)
