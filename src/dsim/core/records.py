"""
Comma-separated record log.

A run writes a seven-line header describing its configuration, then a
column header followed by one data record per node at creation time, and
again after every tick.
"""

from __future__ import annotations

from typing import TextIO

from dsim.core.config import WorldConfig
from dsim.core.node import Node

NODE_HEADER = (
    "id,current pos x,y,start pos x,y,infectable,infected,"
    "infected for,max travel,maxSpeed"
)


def _num(value: float) -> str:
    return format(float(value), "g")


def _flag(value: bool) -> str:
    return "1" if value else "0"


def run_header_lines(config: WorldConfig) -> list[str]:
    """The run header: seed and every recorded configuration value."""
    return [
        f"seed,{config.random_seed}",
        f"Node count,{config.num_nodes}",
        f"min infected time,{config.min_inf_time}",
        f"max infected time,{config.max_inf_time}",
        f"survival rate,{_num(config.survival_rate)}",
        f"reinfect,{_flag(config.reinfect)}",
        f"maxSpeed,{_num(config.max_speed)}",
    ]


def format_node(node: Node) -> str:
    cx, cy = node.current_position
    sx, sy = node.start_position
    return ",".join([
        str(node.id),
        _num(cx), _num(cy),
        _num(sx), _num(sy),
        _flag(node.infectable),
        _flag(node.infected),
        str(node.infected_for),
        _num(node.max_travel),
        _num(node.max_speed),
    ])


def parse_node_record(line: str) -> dict[str, float | int | bool]:
    """Parse a data record back into a dict of typed fields."""
    parts = line.strip().split(",")
    if len(parts) != 10:
        raise ValueError(f"Expected 10 fields in node record, got {len(parts)}: {line!r}")
    return {
        "id": int(parts[0]),
        "current_x": float(parts[1]),
        "current_y": float(parts[2]),
        "start_x": float(parts[3]),
        "start_y": float(parts[4]),
        "infectable": parts[5] == "1",
        "infected": parts[6] == "1",
        "infected_for": int(parts[7]),
        "max_travel": float(parts[8]),
        "max_speed": float(parts[9]),
    }


class RecordLog:
    """
    Writes records to a text sink.

    With no sink every write is dropped. Write errors from the sink are
    not caught.
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    def write_line(self, line: str) -> None:
        if self.stream is not None:
            self.stream.write(line + "\n")

    def run_header(self, config: WorldConfig) -> None:
        for line in run_header_lines(config):
            self.write_line(line)

    def column_header(self) -> None:
        self.write_line(NODE_HEADER)

    def node(self, node: Node) -> None:
        self.write_line(format_node(node))
