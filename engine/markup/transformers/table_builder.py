# engine/markup/transformers/table_builder.py
"""
Pipe-table builder.

Consecutive lines wrapped in ``|`` form one table. The first row is the
header; an optional row of alignment markers sets per-column alignment and is
not rendered::

    | Name | Score |
    | :--- | ----: |
    | Ann  | 10    |

Output:
    <div class="table-wrap"><table>
        <thead><tr><th style="text-align:left">Name</th>...</tr></thead>
        <tbody><tr><td style="text-align:left">Ann</td>...</tr></tbody>
    </table></div>
"""

import re
from typing import List

ALIGNMENT_CELL_RE = re.compile(r"^:?-+:?$")


def _cell_alignment(cell: str) -> str:
    if cell.startswith(":") and cell.endswith(":"):
        return "center"
    if cell.endswith(":"):
        return "right"
    return "left"


def build_table(rows: List[List[str]], alignments: List[str]) -> str:
    if not rows:
        return ""

    def align(index: int) -> str:
        return alignments[index] if index < len(alignments) else "left"

    header_row, body_rows = rows[0], rows[1:]
    parts = ['<div class="table-wrap"><table><thead><tr>']
    for index, cell in enumerate(header_row):
        parts.append(f'<th style="text-align:{align(index)}">{cell}</th>')
    parts.append("</tr></thead>")

    if body_rows:
        parts.append("<tbody>")
        for row in body_rows:
            parts.append("<tr>")
            for index, cell in enumerate(row):
                parts.append(f'<td style="text-align:{align(index)}">{cell}</td>')
            parts.append("</tr>")
        parts.append("</tbody>")

    parts.append("</table></div>")
    return "".join(parts)


def markdown_tables(text: str, context: dict) -> str:
    result: List[str] = []
    rows: List[List[str]] = []
    alignments: List[str] = []
    in_table = False

    def flush():
        # One line per table, split off by the paragraph assembler
        result.append(build_table(rows, alignments))

    for line in text.split("\n"):
        trimmed = line.strip()
        if len(trimmed) > 1 and trimmed.startswith("|") and trimmed.endswith("|"):
            cells = [cell.strip() for cell in trimmed[1:-1].split("|")]
            if all(ALIGNMENT_CELL_RE.match(cell) for cell in cells):
                alignments = [_cell_alignment(cell) for cell in cells]
                continue
            if not in_table:
                in_table = True
                rows = []
                alignments = []
            rows.append(cells)
            continue

        if in_table and rows:
            flush()
        in_table = False
        rows = []
        alignments = []
        result.append(line)

    if in_table and rows:
        flush()

    return "\n".join(result)
