import dataclasses
import pytest

from models.category import (
    CATEGORY_FIELDS,
    Category,
    field_names,
    get_field,
    read_field,
    write_field,
)
from models.entity import EntityRef


class TestEntityRef:
    """Tests for EntityRef."""

    def test_key_assigned_at_construction(self):
        """Test that every new reference gets a distinct key."""
        first = EntityRef()
        second = EntityRef()

        assert first.key
        assert first.key != second.key
        assert first.version == 0

    def test_key_is_immutable(self):
        """Test that the key cannot be reassigned."""
        ref = EntityRef()

        with pytest.raises(dataclasses.FrozenInstanceError):
            ref.key = "other"

    def test_next_version(self):
        """Test that next_version keeps the key and bumps the counter."""
        ref = EntityRef(key="abc", version=3)

        bumped = ref.next_version()

        assert bumped == EntityRef(key="abc", version=4)
        assert ref.version == 3


class TestCategory:
    """Tests for the Category model."""

    def test_new_category_is_root(self):
        """Test defaults of a new category."""
        category = Category("Groceries")

        assert category.description is None
        assert category.parent_key is None
        assert category.is_root
        assert category.version == 0
        assert category.key == category.entity.key

    def test_key_stable_across_field_changes(self):
        """Test that editing fields does not touch the key."""
        category = Category("Before")
        key = category.key

        category.name = "After"
        category.parent_key = "parent"

        assert category.key == key
        assert not category.is_root

    def test_key_property_is_read_only(self):
        """Test that key cannot be assigned on the category."""
        category = Category("Fixed")

        with pytest.raises(AttributeError):
            category.key = "other"

    def test_to_dict_and_from_dict(self):
        """Test conversion to and from dictionaries."""
        category = Category(
            "Food & Drink",
            "Food, drinks, & dining",
            parent_key="p1",
            entity=EntityRef(key="k1", version=2),
        )

        data = category.to_dict()

        assert data == {
            "key": "k1",
            "version": 2,
            "name": "Food & Drink",
            "description": "Food, drinks, & dining",
            "parent_key": "p1",
        }
        assert Category.from_dict(data) == category


class TestFieldTable:
    """Tests for the declared category fields."""

    def test_field_names(self):
        """Test the declared order of fields."""
        assert field_names() == ("key", "version", "name", "description", "parent_key")

    def test_get_unknown_field(self):
        """Test that unknown names return None."""
        assert get_field("nonexistent") is None

    def test_read_only_fields(self):
        """Test which fields lack a writer."""
        read_only = {spec.name for spec in CATEGORY_FIELDS if spec.read_only}

        assert read_only == {"key", "version"}

    def test_every_field_reads_its_value(self):
        """Test reading each field against the model attributes."""
        category = Category(
            "Name", "Text", parent_key="p", entity=EntityRef(key="k", version=7)
        )

        values = {name: read_field(category, name) for name in field_names()}

        assert values == category.to_dict()

    @pytest.mark.parametrize(
        "name,value",
        [("name", "Renamed"), ("description", "New text"), ("parent_key", "p2")],
    )
    def test_write_field(self, name, value):
        """Test writing each writable field."""
        category = Category("Original")

        write_field(category, name, value)

        assert read_field(category, name) == value

    def test_write_read_only_field(self):
        """Test that writing key or version raises AttributeError."""
        category = Category("Original")

        with pytest.raises(AttributeError, match="read-only"):
            write_field(category, "key", "other")
        with pytest.raises(AttributeError, match="read-only"):
            write_field(category, "version", 5)

    def test_unknown_field_raises_key_error(self):
        """Test that reading or writing unknown fields raises KeyError."""
        category = Category("Original")

        with pytest.raises(KeyError):
            read_field(category, "nonexistent")
        with pytest.raises(KeyError):
            write_field(category, "nonexistent", 1)
