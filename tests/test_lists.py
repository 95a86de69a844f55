"""Tests for the Markdown list state machine and BBCode list splitter."""

import pytest
from bs4 import BeautifulSoup

from engine.markup.transformers.list_machine import (
    CHECKLIST,
    ORDERED,
    UNORDERED,
    classify_item,
    markdown_lists,
)
from engine.markup.transformers.structural import split_list_items


class TestClassifyItem:
    def test_unordered_dash_and_star(self) -> None:
        assert classify_item("- a") == (UNORDERED, "a")
        assert classify_item("* a") == (UNORDERED, "a")

    def test_ordered(self) -> None:
        assert classify_item("12. twelve") == (ORDERED, "twelve")

    def test_task_items(self) -> None:
        kind, content = classify_item("- [x] done")
        assert kind == CHECKLIST
        assert 'class="done"' in content
        assert 'checked=""' in content

        kind, content = classify_item("- [ ] todo")
        assert kind == CHECKLIST
        assert "checked" not in content

    def test_rules_and_text_are_not_items(self) -> None:
        assert classify_item("***") is None
        assert classify_item("---") is None
        assert classify_item("plain text") is None
        assert classify_item("*emphasis*") is None


class TestMarkdownLists:
    def test_nested_list_sits_inside_parent_item(self) -> None:
        html = markdown_lists("- a\n  - b\n- c", {})
        assert "<ul><li>a<ul><li>b</li></ul></li><li>c</li></ul>" in html

    def test_nested_structure_is_balanced(self) -> None:
        html = markdown_lists("- a\n  - b\n    - c\n  - d\n- e", {})
        soup = BeautifulSoup(html, "html.parser")
        top = soup.find("ul")
        assert [li.contents[0] for li in top.find_all("li", recursive=False)] == ["a", "e"]
        second = top.li.ul
        assert [li.contents[0] for li in second.find_all("li", recursive=False)] == ["b", "d"]
        assert second.li.ul.li.get_text() == "c"
        assert html.count("<ul>") == html.count("</ul>") == 3

    def test_blank_lines_do_not_split_a_list(self) -> None:
        html = markdown_lists("- a\n\n- b", {})
        assert "<ul><li>a</li><li>b</li></ul>" in html
        assert html.count("<ul>") == 1

    def test_text_closes_the_list(self) -> None:
        html = markdown_lists("- a\n\ntext", {})
        lines = html.split("\n")
        assert "<ul><li>a</li></ul>" in lines
        assert lines[-1] == "text"
        assert lines.index("<ul><li>a</li></ul>") < len(lines) - 2

    def test_type_switch_at_same_level(self) -> None:
        html = markdown_lists("- a\n1. b", {})
        assert "<ul><li>a</li></ul><ol><li>b</li></ol>" in html

    def test_ordered_list_nested_in_unordered(self) -> None:
        html = markdown_lists("- a\n  1. one\n  2. two", {})
        assert "<ul><li>a<ol><li>one</li><li>two</li></ol></li></ul>" in html

    def test_checklist(self) -> None:
        html = markdown_lists("- [x] done\n- [ ] todo", {})
        assert html.strip().startswith('<ul class="checklist">')
        soup = BeautifulSoup(html, "html.parser")
        boxes = soup.find_all("input")
        assert [box.has_attr("checked") for box in boxes] == [True, False]

    def test_non_list_text_passes_through(self) -> None:
        assert markdown_lists("just text\nmore", {}) == "just text\nmore"


class TestBBCodeLists:
    def test_split_on_item_markers(self) -> None:
        assert split_list_items("[*] uno [*] dos") == "<li>uno</li><li>dos</li>"

    def test_multiline_item_keeps_line_breaks(self) -> None:
        assert split_list_items("\n[*] one\nsub\n[*] two\n") == "<li>one<br>sub</li><li>two</li>"

    @pytest.mark.asyncio
    async def test_unordered_and_ordered(self, render_markup) -> None:
        html = await render_markup("[list]\n[*] uno\n[*] dos\n[/list]\n\n[list=1][*]a[/list]")
        assert "<ul><li>uno</li><li>dos</li></ul>" in html
        assert "<ol><li>a</li></ol>" in html

    @pytest.mark.asyncio
    async def test_stray_item_markers_are_not_italics(self, render_markup) -> None:
        html = await render_markup("[*] one [*] two")
        assert "<em>" not in html
        assert "[*] one [*] two" in html

    @pytest.mark.asyncio
    async def test_bbcode_lists_do_not_nest(self, render_markup) -> None:
        html = await render_markup("[list][*]a[list][*]b[/list][/list]")
        assert html.count("<ul>") == 1


class TestListsInPipeline:
    @pytest.mark.asyncio
    async def test_nested_list_renders_as_one_block(self, render_markup) -> None:
        html = await render_markup("- a\n  - b\n- c")
        assert html == "<ul><li>a<ul><li>b</li></ul></li><li>c</li></ul>"

    @pytest.mark.asyncio
    async def test_intro_line_and_list_are_separate_blocks(self, render_markup) -> None:
        html = await render_markup("Shopping:\n* milk\n* **eggs**")
        assert html == "<p>Shopping:</p>\n<ul><li>milk</li><li><strong>eggs</strong></li></ul>"

    @pytest.mark.asyncio
    async def test_text_right_after_list_is_a_paragraph(self, render_markup) -> None:
        html = await render_markup("- a\n- b\nafter")
        assert html == "<ul><li>a</li><li>b</li></ul>\n<p>after</p>"

    def test_list_is_a_single_line_without_padding(self) -> None:
        assert markdown_lists("intro\n- a\n- b\nafter", {}) == (
            "intro\n<ul><li>a</li><li>b</li></ul>\nafter"
        )
