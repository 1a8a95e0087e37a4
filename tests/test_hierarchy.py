"""
Tests for hierarchy building, top-N truncation and sunburst trees.
"""

import pytest

from streamstats.stats.hierarchy import (
    HierarchyNode,
    artist_platform_hierarchy,
    branch,
    build_hierarchy,
    depth,
    filter_leaves,
    iter_leaves,
    leaf,
    node_value,
    to_dict,
    top_n_nodes,
    year_artist_track_hierarchy,
)


def _by_artist(records, **kwargs):
    return build_hierarchy(
        records,
        levels=[lambda r: r.artist],
        leaf_value_fn=lambda r: r.spotify_streams,
        **kwargs,
    )


class TestNodes:

    def test_leaf_and_branch(self):
        node = branch("root", [leaf("a", 1), leaf("b", 2)])
        assert not node.is_leaf
        assert node.children[0].is_leaf
        assert node.value is None

    def test_branch_value_is_sum_of_leaves(self):
        tree = branch("root", [branch("x", [leaf("a", 1), leaf("b", 2)]), leaf("c", 4)])
        assert node_value(tree) == 7
        assert [n.name for n in iter_leaves(tree)] == ["a", "b", "c"]
        assert depth(tree) == 2

    def test_empty_branch(self):
        empty = branch("none", [])
        assert empty.children == ()
        assert not empty.is_leaf
        assert node_value(empty) == 0

    def test_nodes_are_immutable(self):
        node = leaf("a", 1)
        with pytest.raises(AttributeError):
            node.value = 5


class TestBuildHierarchy:

    def test_groups_in_discovery_order(self, sample_records):
        tree = _by_artist(sample_records, root_name="All")

        assert tree.name == "All"
        assert [c.name for c in tree.children] == ["Alpha", "Beta", "Gamma"]
        assert [l.name for l in tree.children[0].children] == ["A1", "A2", "A3", "A4"]
        assert node_value(tree) == sum(r.spotify_streams for r in sample_records)

    def test_no_levels_makes_flat_tree(self, sample_records):
        tree = build_hierarchy(sample_records, [], lambda r: r.spotify_streams)
        assert len(tree.children) == len(sample_records)
        assert all(c.is_leaf for c in tree.children)

    def test_two_levels(self, sample_records):
        tree = build_hierarchy(
            sample_records,
            levels=[lambda r: r.release_year, lambda r: r.artist],
            leaf_value_fn=lambda r: r.spotify_streams,
        )
        assert [c.name for c in tree.children] == ["2022", "2023"]
        assert [c.name for c in tree.children[0].children] == ["Alpha", "Beta"]
        assert depth(tree) == 3

    def test_top_n_limits_groups(self, sample_records):
        tree = _by_artist(sample_records, top_n={0: 2})

        # Alpha 1550, Beta 1000, Gamma 400
        assert [c.name for c in tree.children] == ["Alpha", "Beta"]

    def test_top_n_at_leaf_level_feeds_parent_ranking(self, sample_records):
        tree = _by_artist(sample_records, top_n={0: 3, 1: 1})

        # Alpha keeps only A1 (900) so Beta's top track (700) ranks second
        assert [c.name for c in tree.children] == ["Alpha", "Beta", "Gamma"]
        assert [node_value(c) for c in tree.children] == [900, 700, 400]
        assert all(len(c.children) == 1 for c in tree.children)

    def test_truncation_never_increases_total(self, sample_records):
        full = _by_artist(sample_records)
        for n in range(0, 5):
            truncated = _by_artist(sample_records, top_n={0: n})
            assert node_value(truncated) <= node_value(full)
            assert len(truncated.children) <= n

    def test_ties_keep_first_encountered(self, record_factory):
        records = [
            record_factory(track="x", artist="First", spotify_streams=10),
            record_factory(track="y", artist="Second", spotify_streams=10),
            record_factory(track="z", artist="Third", spotify_streams=10),
        ]
        tree = _by_artist(records, top_n={0: 2})
        assert [c.name for c in tree.children] == ["First", "Second"]

    def test_does_not_mutate_input(self, sample_records):
        before = list(sample_records)
        _by_artist(sample_records, top_n={1: 1})
        assert sample_records == before

    def test_custom_leaf_names(self, sample_records):
        tree = build_hierarchy(
            sample_records[:2], [], lambda r: 1, leaf_name_fn=lambda r: r.isrc
        )
        assert {c.name for c in tree.children} == {"USXXX0000000"}

    def test_top_n_nodes_rejects_negative(self):
        with pytest.raises(ValueError):
            top_n_nodes([], -1)


class TestFilterLeaves:

    def test_filtered_branch_stays_valid(self, sample_records):
        tree = _by_artist(sample_records)
        filtered = filter_leaves(tree, lambda l: l.value >= 700)

        names = [c.name for c in filtered.children]
        assert names == ["Alpha", "Beta", "Gamma"]
        gamma = filtered.children[2]
        assert gamma.children == ()
        assert node_value(gamma) == 0
        assert node_value(filtered) == 1600

    def test_original_tree_untouched(self, sample_records):
        tree = _by_artist(sample_records)
        filter_leaves(tree, lambda l: False)
        assert node_value(tree) == sum(r.spotify_streams for r in sample_records)


class TestSunburstHierarchies:

    def test_year_artist_track(self, sample_records):
        tree = year_artist_track_hierarchy(sample_records, top_artists=1, top_tracks=2)

        assert tree.name == "Spotify Data"
        years = {c.name: c for c in tree.children}
        assert set(years) == {"2022", "2023"}

        # 2022: Alpha has A1, A2, A4 -> top 2 = 900 + 500; Beta has 700
        alpha = years["2022"].children[0]
        assert alpha.name == "Alpha"
        assert [l.name for l in alpha.children] == ["A1", "A2"]
        assert len(years["2022"].children) == 1

        # 2023: Gamma 400 vs Beta 300 vs Alpha 100
        assert years["2023"].children[0].name == "Gamma"

    def test_year_artist_track_without_cuts(self, sample_records):
        tree = year_artist_track_hierarchy(sample_records, top_artists=None, top_tracks=None)
        assert sum(1 for _ in iter_leaves(tree)) == len(sample_records)

    def test_artist_platform(self, sample_records):
        tree = artist_platform_hierarchy(sample_records, top_n=2)

        assert tree.name == "Artists"
        # Beta: 1000 + 1000 + 1000 = 3000, Alpha: 1550 + 560 + 160 = 2270, Gamma: 1400
        assert [c.name for c in tree.children] == ["Beta", "Alpha"]
        beta = tree.children[0]
        assert [(l.name, l.value) for l in beta.children] == [
            ("Spotify", 1000.0), ("YouTube", 1000.0), ("TikTok", 1000.0),
        ]

    def test_to_dict(self):
        tree = branch("root", [branch("x", [leaf("a", 1)]), branch("empty", [])])
        assert to_dict(tree) == {
            "name": "root",
            "children": [
                {"name": "x", "children": [{"name": "a", "value": 1.0}]},
                {"name": "empty", "children": []},
            ],
        }

    def test_node_type(self, sample_records):
        assert isinstance(year_artist_track_hierarchy(sample_records), HierarchyNode)
