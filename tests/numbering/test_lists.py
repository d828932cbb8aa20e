"""
Tests for list conversion and the numbering allocator.
"""

import pytest

from htmlquill.document import NumberingStore
from htmlquill.exceptions import NumberingError
from htmlquill.models import AbstractNumbering, NumberingInstance, NumberingLevel, StyleDefinition
from htmlquill.numbering import NumberingAllocator
from htmlquill.numbering.allocator import HEADING_NUMBERING_NAME
from htmlquill.utils.enums import NumberFormat, StyleFamily


class TestListConversion:
    """Test <ol>, <ul> and <li> conversion."""

    def test_ordered_list_shares_instance(self, converter, document):
        blocks = converter.parse("<ol><li>One</li><li>Two</li></ol>")

        assert [block.get_text() for block in blocks] == ["One", "Two"]
        first, second = blocks
        assert first.numbering['id'] == second.numbering['id']
        assert first.numbering['id'] != 0
        assert first.numbering['level'] == second.numbering['level'] == 0
        assert first.style_id == "ListParagraph"

        instance = document.numbering.get_instance(first.numbering['id'])
        decimal = document.numbering.find_abstract_by_name("decimal")
        assert instance.abstract_id == decimal.abstract_id
        assert instance.level_overrides == {0: 1}

    def test_each_list_gets_new_instance(self, converter):
        blocks = converter.parse("<ol><li>a</li></ol><p>gap</p><ol><li>b</li></ol>")

        first, second = blocks[0], blocks[2]
        assert first.numbering['id'] != second.numbering['id']

    def test_bullet_list(self, converter, document):
        item = converter.parse("<ul><li>x</li></ul>")[0]

        instance = document.numbering.get_instance(item.numbering['id'])
        disc = document.numbering.find_abstract_by_name("disc")
        assert instance.abstract_id == disc.abstract_id
        assert disc.levels[0].number_format == NumberFormat.BULLET

    def test_list_style_type(self, converter, document):
        item = converter.parse('<ol style="list-style-type:lower-roman"><li>x</li></ol>')[0]

        instance = document.numbering.get_instance(item.numbering['id'])
        assert instance.abstract_id == document.numbering.find_abstract_by_name("lower-roman").abstract_id

    def test_nested_ordered_list(self, converter, document):
        """A nested list of the same type continues the parent instance one level deeper."""
        blocks = converter.parse("<ol><li>A<ol><li>B</li></ol></li><li>C</li></ol>")

        outer, inner, last = blocks
        assert outer.get_text() == "A"
        assert inner.get_text() == "B"
        assert inner.numbering['id'] == outer.numbering['id']
        assert inner.numbering['level'] == 1
        assert inner.left_indent == 1560
        assert last.numbering == outer.numbering

        decimal = document.numbering.find_abstract_by_name("decimal")
        assert decimal.is_multilevel
        assert len(decimal.levels) == 9
        assert decimal.get_level(1).text == "%2."

    def test_nested_bullets_in_ordered_list(self, converter):
        blocks = converter.parse("<ol><li>A<ul><li>B</li></ul></li></ol>")

        outer, inner = blocks
        assert inner.numbering['id'] != outer.numbering['id']
        assert inner.numbering['level'] == 1

    def test_text_after_list(self, converter):
        blocks = converter.parse("<ul><li>a</li></ul>after")

        assert blocks[-1].get_text() == "after"
        assert blocks[-1].numbering is None

    def test_item_outside_list(self, converter):
        item = converter.parse("<li>stray</li>")[0]

        assert item.get_text() == "stray"
        assert item.numbering is None

    def test_stray_list_end_ignored(self, converter):
        """A closing list tag without an open list does not shift later lists."""
        blocks = converter.parse("</ol><ol><li>A</li><li>B</li></ol>")

        assert [block.get_text() for block in blocks] == ["A", "B"]
        first, second = blocks
        assert first.numbering is not None
        assert first.numbering['level'] == second.numbering['level'] == 0
        assert first.numbering['id'] == second.numbering['id']

    def test_nesting_deeper_than_nine_levels(self, converter, document):
        html = "".join(f"<ol><li>{depth}" for depth in range(11)) + "</li></ol>" * 11
        items = [block for block in converter.parse(html) if block.numbering]

        assert len(items) == 11
        assert [item.numbering['level'] for item in items] == list(range(9)) + [8, 8]
        assert len({item.numbering['id'] for item in items}) == 1

        decimal = document.numbering.find_abstract_by_name("decimal")
        assert len(decimal.levels) == 9

    def test_item_class_style(self, make_converter, document):
        document.add_style(StyleDefinition("ListBullet", "List Bullet", StyleFamily.PARAGRAPH))
        converter = make_converter()

        blocks = converter.parse('<ul><li class="listbullet">a</li></ul>'
                                 '<ul class="ListBullet"><li>b</li></ul>')

        assert [block.style_id for block in blocks] == ["ListBullet", "ListBullet"]

    def test_custom_indent_clones_definition(self, converter, document):
        blocks = converter.parse('<ol><li style="margin-left:40px">a</li><li>b</li></ol>')

        num_id = blocks[0].numbering['id']
        assert blocks[1].numbering['id'] == num_id
        abstract = document.numbering.get_abstract(document.numbering.get_instance(num_id).abstract_id)
        assert abstract.name == "decimal-indent"
        assert abstract.levels[0].left_indent == 600

    def test_definitions_reused_across_calls(self, converter, document):
        first = converter.parse("<ol><li>a</li></ol>")[0]
        count = len(document.numbering.abstracts)
        second = converter.parse("<ol><li>b</li></ol>")[0]

        assert len(document.numbering.abstracts) == count
        assert second.numbering['id'] == first.numbering['id'] + 1

    def test_instance_ids_unique(self, converter, document):
        converter.parse("<ul><li>a</li></ul><ol><li>b</li></ol><ol><li>c</li></ol>")

        ids = [instance.num_id for instance in document.numbering.instances]
        assert len(ids) == len(set(ids))
        assert all(num_id > 0 for num_id in ids)


class TestNumberingAllocator:
    """Test definition seeding and instance allocation."""

    @pytest.fixture
    def store(self):
        return NumberingStore()

    def test_seeds_definitions(self, store):
        allocator = NumberingAllocator(store)

        assert [abstract.abstract_id for abstract in store.abstracts] == list(range(9))
        assert set(allocator.known_abstract_ids) == {a.name for a in store.abstracts}
        assert allocator.instance_id == 0

    def test_seeds_after_existing_definitions(self, store):
        store.add_abstract(AbstractNumbering(3, "custom", [NumberingLevel(0)]))
        NumberingAllocator(store)

        ids = [abstract.abstract_id for abstract in store.abstracts]
        assert ids == [3] + list(range(4, 13))

    def test_second_allocator_reuses_seeds(self, store):
        NumberingAllocator(store)
        NumberingAllocator(store)

        assert len(store.abstracts) == 9

    def test_instances_continue_existing_ids(self, store):
        first = NumberingAllocator(store)
        store.add_instance(NumberingInstance(7, first.known_abstract_ids["decimal"]))

        second = NumberingAllocator(store)
        assert second.create_list(None, True) == 8

    def test_unknown_list_type_falls_back(self, store):
        allocator = NumberingAllocator(store)

        assert allocator.get_abstract_id("bogus", True) == allocator.known_abstract_ids["decimal"]
        assert allocator.get_abstract_id(None, False) == allocator.known_abstract_ids["disc"]
        assert allocator.get_abstract_id("Square", False) == allocator.known_abstract_ids["square"]

    def test_bullet_list_below_deepest_level_reuses_instance(self, store):
        allocator = NumberingAllocator(store)
        first = allocator.create_list(None, False)
        nested = allocator.create_list(None, False)
        allocator.end_list()
        allocator.end_list()
        again = allocator.create_list(None, False)

        assert nested != first
        # depth 1 is above the deepest level reached so far
        assert again == first

    def test_end_list_without_open_list(self, store):
        allocator = NumberingAllocator(store)
        allocator.end_list()

        assert allocator.level_depth == 0
        allocator.create_list(None, True)
        assert allocator.level_depth == 1

    def test_heading_numbering_is_cascading(self, store):
        allocator = NumberingAllocator(store)
        num_id = allocator.get_heading_numbering_id()

        heading = store.find_abstract_by_name(HEADING_NUMBERING_NAME)
        assert store.get_instance(num_id).abstract_id == heading.abstract_id
        assert heading.get_level(2).text == "%1.%2.%3."
        assert allocator.get_heading_numbering_id() == num_id

    def test_ensure_multilevel_unknown_definition(self, store):
        allocator = NumberingAllocator(store)

        with pytest.raises(NumberingError):
            allocator.ensure_multilevel(99)


class TestNumberingStore:
    """Test the consistency checks of the numbering store."""

    def test_duplicate_abstract_rejected(self):
        store = NumberingStore()
        store.add_abstract(AbstractNumbering(1, "a"))

        with pytest.raises(NumberingError):
            store.add_abstract(AbstractNumbering(1, "b"))

    def test_instance_requires_positive_id(self):
        store = NumberingStore()
        store.add_abstract(AbstractNumbering(1, "a"))

        with pytest.raises(NumberingError):
            store.add_instance(NumberingInstance(0, 1))

    def test_instance_requires_known_definition(self):
        store = NumberingStore()

        with pytest.raises(NumberingError):
            store.add_instance(NumberingInstance(1, 42))
