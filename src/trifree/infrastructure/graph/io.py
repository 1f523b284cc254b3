"""Graph and packing file readers.

Three formats, chosen by suffix:

- ``.json`` / ``.yaml`` / ``.yml``::

      vertices: [1, 2, 3, 4]        # optional, isolated vertices
      edges: [[1, 2], [2, 3], [1, 3]]

- anything else: a whitespace edge list, one ``u v`` pair per line, a
  single token declares an isolated vertex, ``#`` starts a comment.
  Integer-looking tokens become ``int`` vertices.

Packing files use the same suffix rules: a list of vertex triples (or a
mapping with a ``triangles`` key), or one ``a b c`` triple per line.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from trifree.domain.errors import GraphFormatError
from trifree.domain.triangles import Vertex

_STRUCTURED_SUFFIXES = frozenset({".json", ".yaml", ".yml"})


@dataclass(frozen=True)
class GraphDocument:
    """Vertices and edges as read from a file, before graph construction."""

    vertices: list[Vertex] = field(default_factory=list)
    edges: list[tuple[Vertex, Vertex]] = field(default_factory=list)


def _new_yaml() -> YAML:
    """Create a fresh safe YAML loader (the YAML object is stateful)."""
    return YAML(typ="safe")


def _coerce_vertex(raw: Any, *, source: Path) -> Vertex:
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        msg = f"{source}: vertices must be integers or strings, got {raw!r}"
        raise GraphFormatError(msg, path=str(source), vertex=repr(raw))
    return raw


def _parse_token(token: str) -> Vertex:
    try:
        return int(token)
    except ValueError:
        return token


def _load_structured(path: Path) -> Any:
    raw = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            return json.loads(raw)
        return _new_yaml().load(StringIO(raw))
    except (json.JSONDecodeError, YAMLError) as exc:
        msg = f"Invalid {path.suffix.lstrip('.').upper()} in {path}: {exc}"
        raise GraphFormatError(msg, path=str(path)) from exc


def _text_rows(path: Path) -> list[list[str]]:
    rows: list[list[str]] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        content = line.split("#", 1)[0].strip()
        if content:
            rows.append(content.split())
    return rows


def read_graph_document(path: Path) -> GraphDocument:
    """Read a graph file into a :class:`GraphDocument`.

    Raises:
        GraphFormatError: The file is missing, malformed, or uses vertex
            values other than int/str.
    """
    if not path.is_file():
        msg = f"Graph file not found: {path}"
        raise GraphFormatError(msg, path=str(path))

    if path.suffix.lower() not in _STRUCTURED_SUFFIXES:
        vertices: list[Vertex] = []
        edges: list[tuple[Vertex, Vertex]] = []
        for lineno, row in enumerate(_text_rows(path), start=1):
            if len(row) == 1:
                vertices.append(_parse_token(row[0]))
            elif len(row) == 2:
                edges.append((_parse_token(row[0]), _parse_token(row[1])))
            else:
                msg = f"{path}:{lineno}: expected 'u v' or a single vertex, got {' '.join(row)!r}"
                raise GraphFormatError(msg, path=str(path), line=lineno)
        return GraphDocument(vertices=vertices, edges=edges)

    data = _load_structured(path) or {}
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping with 'vertices' and 'edges'"
        raise GraphFormatError(msg, path=str(path))

    vertices = [_coerce_vertex(v, source=path) for v in data.get("vertices") or []]
    edges = []
    for pair in data.get("edges") or []:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            msg = f"{path}: each edge must be a pair, got {pair!r}"
            raise GraphFormatError(msg, path=str(path))
        edges.append((_coerce_vertex(pair[0], source=path), _coerce_vertex(pair[1], source=path)))
    return GraphDocument(vertices=vertices, edges=edges)


def read_packing_triples(path: Path) -> list[tuple[Vertex, Vertex, Vertex]]:
    """Read a packing file as a list of vertex triples.

    Raises:
        GraphFormatError: The file is missing, malformed, or an entry is
            not a triple.
    """
    if not path.is_file():
        msg = f"Packing file not found: {path}"
        raise GraphFormatError(msg, path=str(path))

    if path.suffix.lower() not in _STRUCTURED_SUFFIXES:
        raw_rows: list[Any] = [[_parse_token(t) for t in row] for row in _text_rows(path)]
    else:
        data = _load_structured(path) or []
        if isinstance(data, dict):
            data = data.get("triangles") or []
        if not isinstance(data, list):
            msg = f"{path}: expected a list of triangles"
            raise GraphFormatError(msg, path=str(path))
        raw_rows = data

    triples: list[tuple[Vertex, Vertex, Vertex]] = []
    for row in raw_rows:
        if not isinstance(row, (list, tuple)) or len(row) != 3:
            msg = f"{path}: each triangle must list exactly 3 vertices, got {row!r}"
            raise GraphFormatError(msg, path=str(path))
        a, b, c = (_coerce_vertex(v, source=path) for v in row)
        triples.append((a, b, c))
    return triples
