"""
Markdown table rendering for leaderboard sections, and packing of
rendered sections into Discord-sized messages.

Tables look like:

    | @ | `Player` | `Win%` |
    | [@](<https://www.opendota.com/players/1>) | `Alice ` | ` 60%` |

Column width is the longest visible text in the column (header included);
link columns only count the marker, never the URL.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union

from apps.leaderboard_bot.common.constants import DISCORD_MESSAGE_MAX_LENGTH
from apps.leaderboard_bot.leaderboard.models import Section

logger = logging.getLogger(__name__)

OPENDOTA_PLAYER_URL = "https://www.opendota.com/players/{player_id}"
OPENDOTA_MATCH_URL = "https://www.opendota.com/matches/{match_id}"
LINK_MARKER = "@"
NO_DATA_LINE = "No data available."


def player_url(player_id: int) -> str:
    return OPENDOTA_PLAYER_URL.format(player_id=player_id)


def match_url(match_id: int) -> str:
    return OPENDOTA_MATCH_URL.format(match_id=match_id)


def mask_link(url: str) -> str:
    """Markdown link showing only the marker; angle brackets keep Discord from unfurling it."""
    return f"[{LINK_MARKER}](<{url}>)"


@dataclass(frozen=True)
class LinkColumn:
    urls: Sequence[str]

    def __len__(self) -> int:
        return len(self.urls)

    @property
    def width(self) -> int:
        return len(LINK_MARKER)

    def header_cell(self) -> str:
        return LINK_MARKER.ljust(self.width)

    def cell(self, row: int) -> str:
        return mask_link(self.urls[row])


@dataclass(frozen=True)
class TextColumn:
    header: str
    values: Sequence[str]

    def __len__(self) -> int:
        return len(self.values)

    @property
    def width(self) -> int:
        return max([len(self.header), *(len(v) for v in self.values)])

    def header_cell(self) -> str:
        return f"`{self.header.ljust(self.width)}`"

    def cell(self, row: int) -> str:
        return f"`{self.values[row].ljust(self.width)}`"


Column = Union[LinkColumn, TextColumn]


def format_row(cells: Iterable[str]) -> str:
    return "| " + " | ".join(cells) + " |"


class TableBuilder:
    """Collects columns for one section and renders them to table lines."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.columns: List[Column] = []

    def add_column(self, column: Column) -> "TableBuilder":
        if self.columns and len(column) != len(self.columns[0]):
            raise ValueError(
                f"Column has {len(column)} rows, expected {len(self.columns[0])} in table {self.title!r}"
            )
        self.columns.append(column)
        return self

    @property
    def row_count(self) -> int:
        return len(self.columns[0]) if self.columns else 0

    def render_lines(self) -> List[str]:
        if self.row_count == 0:
            return [NO_DATA_LINE]

        lines = [format_row(column.header_cell() for column in self.columns)]
        for row in range(self.row_count):
            lines.append(format_row(column.cell(row) for column in self.columns))
        return lines

    def build(self) -> Section:
        return Section(title=self.title, lines=tuple(self.render_lines()))


def render_section(section: Section) -> List[str]:
    """The title as a level-3 heading followed by the table lines."""
    return [f"### {section.title}", *section.lines]


def section_to_message(section: Section) -> str:
    return "".join(f"{line}\n" for line in render_section(section))


def batch_messages(contents: Sequence[str], max_length: int = DISCORD_MESSAGE_MAX_LENGTH) -> List[str]:
    """
    Greedily pack whole sections into messages of at most max_length characters.

    Sections are never split. A section longer than max_length is sent on its
    own and will be rejected or truncated by Discord; it is logged here.

    Args:
        contents: Rendered sections, in display order
        max_length: Message size limit

    Returns:
        Non-empty messages, in order
    """
    batches: List[str] = []
    current = ""

    for content in contents:
        if not content:
            continue
        if len(content) > max_length:
            logger.warning(
                f"Leaderboard section of {len(content)} chars exceeds message limit {max_length}"
            )
        if current and len(current) + len(content) > max_length:
            batches.append(current)
            current = ""
        current += content

    if current:
        batches.append(current)

    return batches
