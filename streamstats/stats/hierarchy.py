"""
Hierarchy Module

Folds flat track records into nested group trees for the sunburst charts
(release year -> artist -> track, or artist -> platform).

Branch magnitudes are never stored: ``node_value`` sums the leaves on demand,
so a filtered tree can never carry a stale total.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterator, List, Mapping, Optional, Sequence, Tuple

from streamstats.pipeline import config
from streamstats.pipeline.records import Records, get_field, iter_records
from streamstats.stats.aggregation import group_records, rollup, sum_of

logger = logging.getLogger(__name__)

KeyFn = Callable[[Any], Hashable]


@dataclass(frozen=True)
class HierarchyNode:
    """A named node; a leaf carries ``value``, a branch carries ``children``."""

    name: str
    value: Optional[float] = None
    children: Optional[Tuple["HierarchyNode", ...]] = None

    @property
    def is_leaf(self) -> bool:
        return self.children is None


def leaf(name: str, value: float) -> HierarchyNode:
    return HierarchyNode(name=name, value=float(value))


def branch(name: str, children: Sequence[HierarchyNode]) -> HierarchyNode:
    return HierarchyNode(name=name, children=tuple(children))


def node_value(node: HierarchyNode) -> float:
    """Leaf value, or the sum of all leaves below a branch (0 for an empty branch)."""
    if node.is_leaf:
        return node.value or 0.0
    return sum(node_value(child) for child in node.children)


def iter_leaves(node: HierarchyNode) -> Iterator[HierarchyNode]:
    if node.is_leaf:
        yield node
        return
    for child in node.children:
        yield from iter_leaves(child)


def depth(node: HierarchyNode) -> int:
    """Number of levels below ``node`` (0 for a leaf)."""
    if node.is_leaf or not node.children:
        return 0
    return 1 + max(depth(child) for child in node.children)


def top_n_nodes(nodes: Sequence[HierarchyNode], n: int) -> List[HierarchyNode]:
    """Keep the ``n`` largest nodes by value; ties keep their original order."""
    if n < 0:
        raise ValueError(f"top-N must be non-negative, got {n}")
    # sorted() is stable, including with reverse=True
    return sorted(nodes, key=node_value, reverse=True)[:n]


def build_hierarchy(
    records: Records,
    levels: Sequence[KeyFn],
    leaf_value_fn: Callable[[Any], float],
    root_name: str = "root",
    top_n: Optional[Mapping[int, int]] = None,
    leaf_name_fn: Optional[Callable[[Any], str]] = None,
) -> HierarchyNode:
    """
    Group records level by level into a tree.

    Args:
        records: Records to fold
        levels: Key functions, outermost first (e.g. release year, then artist)
        leaf_value_fn: Value of the leaf made from each record
        root_name: Name of the root node
        top_n: Optional truncation per depth. Depth 0 is the root's children,
            depth ``len(levels)`` is the leaves. Groups are ranked by their
            summed value, descending
        leaf_name_fn: Leaf label (defaults to the record's track name)

    Returns:
        Root HierarchyNode. Branches left with no children are kept with
        ``children == ()``.
    """
    top_n = dict(top_n or {})
    if leaf_name_fn is None:
        leaf_name_fn = lambda r: get_field(r, "track")

    def build(name: str, group: List[Any], level: int) -> HierarchyNode:
        if level == len(levels):
            children = [leaf(str(leaf_name_fn(r)), leaf_value_fn(r)) for r in group]
        else:
            grouped = group_records(group, levels[level])
            children = [build(str(key), members, level + 1) for key, members in grouped.items()]

        if level in top_n:
            children = top_n_nodes(children, top_n[level])
        return branch(name, children)

    root = build(root_name, list(iter_records(records)), 0)
    logger.debug(f"Built hierarchy '{root_name}' with {sum(1 for _ in iter_leaves(root))} leaves")
    return root


def filter_leaves(node: HierarchyNode, predicate: Callable[[HierarchyNode], bool]) -> HierarchyNode:
    """Copy of the tree keeping only leaves that satisfy ``predicate``."""
    if node.is_leaf:
        return node
    kept = [
        filter_leaves(child, predicate)
        for child in node.children
        if not child.is_leaf or predicate(child)
    ]
    return branch(node.name, kept)


def to_dict(node: HierarchyNode) -> Dict[str, Any]:
    """Plain nested dict ({name, value} or {name, children}) for export."""
    if node.is_leaf:
        return {"name": node.name, "value": node.value}
    return {"name": node.name, "children": [to_dict(child) for child in node.children]}


# =============================================================================
# SUNBURST HIERARCHIES
# =============================================================================

def year_artist_track_hierarchy(
    records: Records,
    value_field: str = "spotify_streams",
    top_artists: Optional[int] = config.TOP_ARTISTS_PER_YEAR,
    top_tracks: Optional[int] = config.TOP_TRACKS_PER_ARTIST,
) -> HierarchyNode:
    """
    Release year -> artist -> track, valued by ``value_field``.

    Each artist keeps its ``top_tracks`` biggest tracks and is ranked by the sum
    of those; each year keeps its ``top_artists`` biggest artists. Pass None
    to disable either cut.
    """
    top_n = {}
    if top_artists is not None:
        top_n[1] = top_artists
    if top_tracks is not None:
        top_n[2] = top_tracks

    return build_hierarchy(
        records,
        levels=[
            lambda r: get_field(r, "release_date").year,
            lambda r: get_field(r, "artist"),
        ],
        leaf_value_fn=lambda r: get_field(r, value_field),
        root_name="Spotify Data",
        top_n=top_n,
    )


def artist_platform_hierarchy(
    records: Records,
    top_n: Optional[int] = config.TOP_ARTISTS_PLATFORM,
    platforms: Mapping[str, str] = config.SUNBURST_PLATFORMS,
) -> HierarchyNode:
    """
    Artist -> platform totals for the multi-platform sunburst.

    Artists are ranked by the combined total over ``platforms`` and the
    ``top_n`` largest are kept.
    """
    totals = rollup(
        records,
        lambda r: get_field(r, "artist"),
        **{label: sum_of(field) for label, field in platforms.items()},
    )

    artists = [
        branch(str(artist), [leaf(label, value) for label, value in platform_totals.items()])
        for artist, platform_totals in totals.items()
    ]
    if top_n is not None:
        artists = top_n_nodes(artists, top_n)

    return branch("Artists", artists)
