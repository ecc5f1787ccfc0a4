"""Source to target money-flow graph, pruned to the heaviest links."""

from __future__ import annotations

from typing import Dict, List, Tuple

from forensics.models import FlowGraph, GraphLink, GraphNode

LINK_LIMIT = 50


class FlowAccumulator:
    def __init__(self) -> None:
        self._links: Dict[Tuple[str, str], float] = {}

    def add(self, source: str, target: str, amount: float) -> None:
        key = (source, target)
        self._links[key] = self._links.get(key, 0.0) + amount

    def build(self, limit: int = LINK_LIMIT) -> FlowGraph:
        """Keep the top links by value.

        Node values sum only the retained links touching the node.
        """
        ranked = sorted(
            (GraphLink(source=s, target=t, value=v) for (s, t), v in self._links.items()),
            key=lambda link: link.value,
            reverse=True,
        )
        kept = ranked[:limit]

        sources: Dict[str, float] = {}
        targets: Dict[str, float] = {}
        for link in kept:
            sources[link.source] = sources.get(link.source, 0.0) + link.value
            targets[link.target] = targets.get(link.target, 0.0) + link.value

        nodes: List[GraphNode] = [
            GraphNode(id=name, type="source", value=value) for name, value in sources.items()
        ]
        nodes.extend(
            GraphNode(id=name, type="target", value=value) for name, value in targets.items()
        )
        return FlowGraph(nodes=tuple(nodes), links=tuple(kept))


__all__ = ["FlowAccumulator", "LINK_LIMIT"]
