"""Hierarchy analysis: inheritance cycles."""

from __future__ import annotations

from collections.abc import Mapping


def find_cycles(parent_map: Mapping[str, str], max_cycles: int = 10) -> list[list[str]]:
    """Find inheritance cycles. Each cycle is listed once, starting at its smallest name."""
    cycles: list[list[str]] = []
    seen: set[tuple[str, ...]] = set()
    done: set[str] = set()

    for start in sorted(parent_map):
        if len(cycles) >= max_cycles:
            break
        path: list[str] = []
        on_path: set[str] = set()
        current: str | None = start
        while current is not None and current not in done:
            if current in on_path:
                cycle = path[path.index(current) :]
                pivot = cycle.index(min(cycle))
                key = tuple(cycle[pivot:] + cycle[:pivot])
                if key not in seen:
                    seen.add(key)
                    cycles.append(list(key))
                break
            path.append(current)
            on_path.add(current)
            current = parent_map.get(current)
        done.update(path)

    return cycles
