"""Directed multigraph over caller-supplied edge objects."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Iterable, TypeVar

E = TypeVar("E")
V = TypeVar("V", bound=Hashable)


@dataclass(frozen=True)
class GraphSettings:
    """How to read origin and target vertices off an edge."""

    get_edge_origin: Callable[[Any], Any]
    get_edge_target: Callable[[Any], Any]


class Graph(Generic[E, V]):
    """Edges keep insertion order. Vertices referenced by edges are added implicitly."""

    def __init__(self, settings: GraphSettings, edges: Iterable[E], vertices: Iterable[V]) -> None:
        self._settings = settings
        self._edges: list[E] = list(edges)
        self._vertices: list[V] = []
        self._outgoing: dict[V, list[E]] = {}
        self._incoming: dict[V, list[E]] = {}
        for vertex in vertices:
            self._add_vertex(vertex)
        for edge in self._edges:
            origin = settings.get_edge_origin(edge)
            target = settings.get_edge_target(edge)
            self._add_vertex(origin)
            self._add_vertex(target)
            self._outgoing[origin].append(edge)
            self._incoming[target].append(edge)

    def _add_vertex(self, vertex: V) -> None:
        if vertex not in self._outgoing:
            self._vertices.append(vertex)
            self._outgoing[vertex] = []
            self._incoming[vertex] = []

    @property
    def edges(self) -> list[E]:
        return list(self._edges)

    @property
    def vertices(self) -> list[V]:
        return list(self._vertices)

    def get_edge_origin(self, edge: E) -> V:
        return self._settings.get_edge_origin(edge)

    def get_edge_target(self, edge: E) -> V:
        return self._settings.get_edge_target(edge)

    def outgoing_edges(self, vertex: V) -> list[E]:
        return list(self._outgoing.get(vertex, ()))

    def incoming_edges(self, vertex: V) -> list[E]:
        return list(self._incoming.get(vertex, ()))

    def show_vertex(self, vertex: V) -> str:
        return str(vertex)

    def show_edge(self, edge: E) -> str:
        return f"{self.get_edge_origin(edge)} -> {self.get_edge_target(edge)}"


def construct_graph(settings: GraphSettings, edges: Iterable[E], vertices: Iterable[V]) -> Graph[E, V]:
    return Graph(settings, edges, vertices)
