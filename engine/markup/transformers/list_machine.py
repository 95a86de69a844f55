# engine/markup/transformers/list_machine.py
"""
Markdown list state machine.

Lines are fed one at a time. Leading whitespace is the item's indent and a
stack of open list frames, ordered by indent, decides what to emit:

- smaller indent than the top frame: close frames until the top fits
- larger indent (or no open list): open a nested list inside the current item
- same indent, different kind: close the list and open one of the new kind
- non-item text: close every open list

Blank lines never close a list, so items separated by empty lines stay in
one list. An item's ``</li>`` is only written when its next sibling starts or
its list closes, so nested lists end up inside their parent item::

    - a
      - b          →   <ul><li>a<ul><li>b</li></ul></li><li>c</li></ul>
    - c

Supported items: ``- [ ] task`` / ``- [x] task``, ``1. ordered``,
``- item`` / ``* item``. Lines of three or more ``-``/``*`` are rules, not items.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

UNORDERED = "ul"
ORDERED = "ol"
CHECKLIST = "checklist"

TASK_ITEM_RE = re.compile(r"^- \[([ xX])\] (.*)$")
ORDERED_ITEM_RE = re.compile(r"^(\d+)\. (.*)$")
UNORDERED_ITEM_RE = re.compile(r"^[-*] (.*)$")
RULE_RE = re.compile(r"^[-*]{3,}$")


@dataclass
class ListFrame:
    kind: str
    indent: int
    item_open: bool = False

    @property
    def open_tag(self) -> str:
        return '<ul class="checklist">' if self.kind == CHECKLIST else f"<{self.kind}>"

    @property
    def close_tag(self) -> str:
        return "</ul>" if self.kind == CHECKLIST else f"</{self.kind}>"


def _task_item(checked: bool, text: str) -> str:
    label_class = ' class="done"' if checked else ""
    checked_attr = ' checked=""' if checked else ""
    return (
        f'<p><label{label_class}><input type="checkbox" class="check" disabled=""'
        f"{checked_attr}> {text}</label></p>"
    )


def classify_item(trimmed: str) -> Optional[Tuple[str, str]]:
    """Return ``(kind, content_html)`` for a list item line, else ``None``."""
    match = TASK_ITEM_RE.match(trimmed)
    if match:
        return CHECKLIST, _task_item(match.group(1).lower() == "x", match.group(2))

    match = ORDERED_ITEM_RE.match(trimmed)
    if match:
        return ORDERED, match.group(2)

    if RULE_RE.match(trimmed):
        return None

    match = UNORDERED_ITEM_RE.match(trimmed)
    if match:
        return UNORDERED, match.group(1)

    return None


class ListStateMachine:
    def __init__(self):
        self.stack: List[ListFrame] = []
        self.output: List[str] = []
        self._parts: List[str] = []
        self._held_blank_lines: List[str] = []

    def feed(self, line: str) -> None:
        trimmed = line.strip()
        item = classify_item(trimmed)

        if item is None:
            if not trimmed and self.stack:
                self._held_blank_lines.append(line)
                return
            self.close_all()
            self.output.append(line)
            return

        kind, content = item
        indent = len(line) - len(line.lstrip())
        self._held_blank_lines = []

        # 1. Close deeper levels
        while self.stack and indent < self.stack[-1].indent:
            self._pop()

        # 2. Open a new level
        if not self.stack or indent > self.stack[-1].indent:
            self._push(kind, indent)
        # 3. Change of list type at the same level
        elif kind != self.stack[-1].kind:
            self._pop()
            self._push(kind, indent)
        elif self.stack[-1].item_open:
            self._parts.append("</li>")

        self._parts.append(f"<li>{content}")
        self.stack[-1].item_open = True

    def close_all(self) -> None:
        """Close every open list and flush it as a single line."""
        while self.stack:
            self._pop()
        if self._parts:
            self.output.append("".join(self._parts))
            self._parts = []
        self.output.extend(self._held_blank_lines)
        self._held_blank_lines = []

    def _push(self, kind: str, indent: int) -> None:
        frame = ListFrame(kind, indent)
        self.stack.append(frame)
        self._parts.append(frame.open_tag)

    def _pop(self) -> None:
        frame = self.stack.pop()
        if frame.item_open:
            self._parts.append("</li>")
        self._parts.append(frame.close_tag)


def markdown_lists(text: str, context: dict) -> str:
    machine = ListStateMachine()
    for line in text.split("\n"):
        machine.feed(line)
    machine.close_all()
    return "\n".join(machine.output)
