"""Tests for the technology Sankey aggregation and layout."""

import pytest

from nexora.sankey import (
    CHART_HEIGHT,
    NODE_VERTICAL_SPACING,
    ROOT_ID,
    SankeyLink,
    bar_fraction,
    build_sankey_data,
    content_height,
    default_selected_categories,
    layout_nodes,
    link_endpoints,
    link_opacity,
    link_path,
    link_width,
    needs_scroll,
    sankey_figure,
    technology_id,
    toggle_category,
    visible_links,
    visible_technologies,
)


def test_empty_rows():
    data = build_sankey_data([])
    assert data.nodes == [] and data.links == [] and data.all_categories == []


def test_values_sum_up(technographics_rows):
    data = build_sankey_data(technographics_rows)
    assert data.root.value == len(technographics_rows)
    assert sum(c.value for c in data.categories) == data.root.value
    for category in data.categories:
        assert sum(t.value for t in data.children(category.id)) == category.value


def test_missing_fields_fall_back(technographics_rows):
    data = build_sankey_data(technographics_rows)
    assert "Other" in data.all_categories
    assert technology_id("Other", "Unknown") in {t.id for t in data.technologies}


def test_same_technology_under_two_categories_stays_separate():
    rows = [
        {"category": "Cloud", "technology": "Kubernetes"},
        {"category": "DevOps", "technology": "Kubernetes"},
    ]
    data = build_sankey_data(rows)
    assert len(data.technologies) == 2
    assert {t.label for t in data.technologies} == {"Kubernetes"}


def test_category_selection_filters_rows(technographics_rows):
    data = build_sankey_data(technographics_rows, ["Big Data"])
    assert data.root.value == 2
    assert [c.id for c in data.categories] == ["Big Data"]
    # the option list still covers every category
    assert data.all_categories == ["AI/ML", "Big Data", "Other"]


def test_default_selected_categories():
    assert default_selected_categories(["AI/ML", "Cloud", "Blockchain"]) == ["AI/ML", "Blockchain"]
    assert default_selected_categories(["Cloud"]) == []


def test_links_connect_root_categories_and_technologies(technographics_rows):
    data = build_sankey_data(technographics_rows)
    root_links = [l for l in data.links if l.source == ROOT_ID]
    assert {l.target for l in root_links} == {c.id for c in data.categories}
    ai = technology_id("AI/ML", "TensorFlow")
    assert SankeyLink("AI/ML", ai, 1) in data.links


def test_layout_fully_expanded():
    rows = [
        {"category": "A", "technology": "x"},
        {"category": "A", "technology": "y"},
        {"category": "B", "technology": "z"},
    ]
    data = build_sankey_data(rows)
    pos = layout_nodes(data)
    assert pos[technology_id("A", "x")] == 64
    assert pos[technology_id("A", "y")] == 92
    assert pos["A"] == 78
    # A block ends at 106, then 0.3 * spacing
    b_tech = 50 + 2 * NODE_VERTICAL_SPACING + NODE_VERTICAL_SPACING * 0.3 + 14
    assert pos[technology_id("B", "z")] == pytest.approx(b_tech)
    assert pos["B"] == pytest.approx(b_tech)
    assert pos[ROOT_ID] == pytest.approx((78 + b_tech) / 2)


def test_layout_collapsed_categories_use_block_start():
    rows = [{"category": "A", "technology": "x"}, {"category": "B", "technology": "y"}]
    data = build_sankey_data(rows)
    pos = layout_nodes(data, expanded=set())
    assert pos["A"] == 50
    assert pos["B"] == pytest.approx(50 + NODE_VERTICAL_SPACING * 1.2)
    assert technology_id("A", "x") not in pos


def test_root_defaults_to_half_chart_height_without_categories():
    data = build_sankey_data([{"category": "A", "technology": "x"}])
    data.nodes = [n for n in data.nodes if n.kind == "root"]
    assert layout_nodes(data)[ROOT_ID] == CHART_HEIGHT / 2


def test_link_width_bounds():
    assert link_width(1, 100) == 3
    assert link_width(100, 100) == 15
    assert link_width(50, 100) == 7.5
    assert link_width(1, 0) == 3


def test_link_path_shape():
    assert link_path(0, 10, 100, 20, 4) == (
        "M 0 8.0 C 50.0 8.0, 50.0 18.0, 100 18.0 "
        "L 100 22.0 C 50.0 22.0, 50.0 12.0, 0 12.0 Z"
    )


def test_link_endpoints_and_opacity(technographics_rows):
    data = build_sankey_data(technographics_rows)
    assert link_endpoints(SankeyLink(ROOT_ID, "AI/ML", 2), data) == (100, 200)
    tech = technology_id("AI/ML", "PyTorch")
    assert link_endpoints(SankeyLink("AI/ML", tech, 1), data) == (350, 420)
    link = SankeyLink(ROOT_ID, "AI/ML", 2)
    assert link_opacity(link, "AI/ML") == 0.7
    assert link_opacity(link, "Big Data") == 0.4
    assert link_opacity(link, None) == 0.4


def test_expansion_controls_visible_nodes_and_height(technographics_rows):
    data = build_sankey_data(technographics_rows)
    assert visible_technologies(data, set()) == []
    assert all(l.source == ROOT_ID for l in visible_links(data, set()))
    assert content_height(data, set()) == CHART_HEIGHT

    expanded = toggle_category(set(), "AI/ML")
    assert expanded == {"AI/ML"}
    assert len(visible_technologies(data, expanded)) == 2
    assert content_height(data, expanded) == CHART_HEIGHT + 2 * NODE_VERTICAL_SPACING
    assert toggle_category(expanded, "AI/ML") == set()


def test_needs_scroll():
    assert not needs_scroll(400)
    assert needs_scroll(401)


def test_bar_fraction(technographics_rows):
    data = build_sankey_data(technographics_rows)
    assert bar_fraction(data.root, data) == 1
    big_data = next(c for c in data.categories if c.id == "Big Data")
    assert bar_fraction(big_data, data) == 1
    other = next(c for c in data.categories if c.id == "Other")
    assert bar_fraction(other, data) == 0.5


def test_figure_draws_ribbons_for_visible_links(technographics_rows):
    data = build_sankey_data(technographics_rows)
    fig = sankey_figure(data, {"AI/ML"})
    paths = [s for s in fig.layout.shapes if s.type == "path"]
    assert len(paths) == len(visible_links(data, {"AI/ML"}))
    assert fig.layout.height == content_height(data, {"AI/ML"})
