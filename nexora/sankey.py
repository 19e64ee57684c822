"""Technology adoption Sankey: aggregation, layout and plotly rendering.

Rows are counted into a three column flow::

    Technologies (root) -> category -> technology

The layout is computed in pixel space with y growing downwards, the same
space the figure uses (the y axis is reversed when drawn).
"""

from dataclasses import dataclass, field

import plotly.graph_objects as go

ROOT_ID = "Technologies"
ROOT_COLOR = "#1f2937"
NODE_COLOR = "#3b82f6"

CHART_HEIGHT = 280
COLUMN_X = {"Technologies": 50, "Category": 200, "Products": 420}
NODE_WIDTH = 150
NODE_VERTICAL_SPACING = 28
ROOT_BAR_WIDTH = 80
MAX_VISIBLE_HEIGHT = 400

MAX_SELECTED_CATEGORIES = 3
DEFAULT_CATEGORIES = ["AI/ML", "Big Data", "Blockchain"]


@dataclass
class SankeyNode:
    id: str
    label: str
    value: int
    color: str
    kind: str  # "root", "category" or "technology"
    category: str | None = None


@dataclass
class SankeyLink:
    source: str
    target: str
    value: int


@dataclass
class SankeyData:
    nodes: list[SankeyNode] = field(default_factory=list)
    links: list[SankeyLink] = field(default_factory=list)
    all_categories: list[str] = field(default_factory=list)

    @property
    def root(self) -> SankeyNode | None:
        return next((n for n in self.nodes if n.kind == "root"), None)

    @property
    def categories(self) -> list[SankeyNode]:
        return [n for n in self.nodes if n.kind == "category"]

    @property
    def technologies(self) -> list[SankeyNode]:
        return [n for n in self.nodes if n.kind == "technology"]

    def children(self, category_id: str) -> list[SankeyNode]:
        return [n for n in self.technologies if n.category == category_id]


def technology_id(category: str, technology: str) -> str:
    return f"{category}|{technology}"


def build_sankey_data(rows: list[dict], selected_categories=None) -> SankeyData:
    if not rows:
        return SankeyData()

    all_categories = sorted({row.get("category") or "Other" for row in rows})

    if selected_categories:
        rows = [r for r in rows if (r.get("category") or "Other") in selected_categories]

    category_counts: dict[str, int] = {}
    technology_counts: dict[tuple[str, str], int] = {}
    for row in rows:
        category = row.get("category") or "Other"
        technology = row.get("technology") or "Unknown"
        category_counts[category] = category_counts.get(category, 0) + 1
        key = (category, technology)
        technology_counts[key] = technology_counts.get(key, 0) + 1

    data = SankeyData(all_categories=all_categories)
    data.nodes.append(SankeyNode(ROOT_ID, ROOT_ID, len(rows), ROOT_COLOR, "root"))

    for category, count in category_counts.items():
        data.nodes.append(SankeyNode(category, category, count, NODE_COLOR, "category"))
        data.links.append(SankeyLink(ROOT_ID, category, count))

    for (category, technology), count in technology_counts.items():
        node_id = technology_id(category, technology)
        data.nodes.append(
            SankeyNode(node_id, technology, count, NODE_COLOR, "technology", category)
        )
        data.links.append(SankeyLink(category, node_id, count))

    return data


def default_selected_categories(all_categories: list[str]) -> list[str]:
    return [c for c in DEFAULT_CATEGORIES if c in all_categories]


# Expansion


def visible_technologies(data: SankeyData, expanded: set[str]) -> list[SankeyNode]:
    return [n for n in data.technologies if n.category in expanded]


def visible_links(data: SankeyData, expanded: set[str]) -> list[SankeyLink]:
    return [l for l in data.links if l.source == ROOT_ID or l.source in expanded]


def toggle_category(expanded: set[str], category_id: str) -> set[str]:
    expanded = set(expanded)
    if category_id in expanded:
        expanded.remove(category_id)
    else:
        expanded.add(category_id)
    return expanded


def content_height(data: SankeyData, expanded: set[str]) -> int:
    return CHART_HEIGHT + len(visible_technologies(data, expanded)) * NODE_VERTICAL_SPACING


def needs_scroll(height: int) -> bool:
    return height > MAX_VISIBLE_HEIGHT


# Layout


def layout_nodes(data: SankeyData, expanded: set[str] | None = None) -> dict[str, float]:
    """Return the vertical centre of every laid out node, keyed by node id.

    Technology nodes are only placed under expanded categories; pass
    ``expanded=None`` to place all of them.
    """
    positions: dict[str, float] = {}
    current_y = 50.0

    for category in data.categories:
        block_start = current_y
        child_ys = []
        if expanded is None or category.id in expanded:
            for child in data.children(category.id):
                y = current_y + NODE_VERTICAL_SPACING / 2
                positions[child.id] = y
                child_ys.append(y)
                current_y += NODE_VERTICAL_SPACING

        positions[category.id] = sum(child_ys) / len(child_ys) if child_ys else block_start
        current_y += NODE_VERTICAL_SPACING * (0.3 if child_ys else 1.2)

    category_ys = [positions[c.id] for c in data.categories]
    positions[ROOT_ID] = sum(category_ys) / len(category_ys) if category_ys else CHART_HEIGHT / 2
    return positions


def link_width(value: float, max_value: float) -> float:
    if max_value <= 0:
        return 3
    return max(3, min(20, value / max_value * 15))


def link_path(x1: float, y1: float, x2: float, y2: float, width: float = 2) -> str:
    """Closed ribbon between two points: cubic top edge, cubic bottom edge back."""
    mid = (x1 + x2) / 2
    h = width / 2
    top = f"M {x1} {y1 - h} C {mid} {y1 - h}, {mid} {y2 - h}, {x2} {y2 - h}"
    bottom = f"L {x2} {y2 + h} C {mid} {y2 + h}, {mid} {y1 + h}, {x1} {y1 + h} Z"
    return f"{top} {bottom}"


def link_endpoints(link: SankeyLink, data: SankeyData) -> tuple[float, float]:
    category_ids = {c.id for c in data.categories}
    source_x = (
        COLUMN_X["Technologies"] + 50
        if link.source == ROOT_ID
        else COLUMN_X["Category"] + NODE_WIDTH
    )
    target_x = COLUMN_X["Category"] if link.target in category_ids else COLUMN_X["Products"]
    return source_x, target_x


def link_opacity(link: SankeyLink, hovered: str | None) -> float:
    return 0.7 if hovered is not None and hovered in (link.source, link.target) else 0.4


def bar_fraction(node: SankeyNode, data: SankeyData) -> float:
    """Node bar length relative to the largest node in its column."""
    if node.kind == "root":
        peers = [node]
    elif node.kind == "category":
        peers = data.categories
    else:
        peers = data.technologies
    largest = max([p.value for p in peers] + [1])
    return node.value / largest


def sankey_figure(data: SankeyData, expanded: set[str], hovered: str | None = None) -> go.Figure:
    positions = layout_nodes(data, expanded)
    nodes = {n.id: n for n in data.nodes}
    links = visible_links(data, expanded)
    max_value = max([l.value for l in data.links] + [0])
    height = content_height(data, expanded)

    shapes = []
    annotations = []

    for link in links:
        if link.source not in positions or link.target not in positions:
            continue
        x1, x2 = link_endpoints(link, data)
        shapes.append(
            dict(
                type="path",
                path=link_path(x1, positions[link.source], x2, positions[link.target],
                               link_width(link.value, max_value)),
                fillcolor=nodes[link.target].color,
                opacity=link_opacity(link, hovered),
                line=dict(width=0),
                layer="below",
            )
        )

    for node_id, y in positions.items():
        node = nodes[node_id]
        if node.kind == "root":
            x, width = COLUMN_X["Technologies"] - 40, ROOT_BAR_WIDTH
        elif node.kind == "category":
            x, width = COLUMN_X["Category"], NODE_WIDTH
        else:
            x, width = COLUMN_X["Products"], NODE_WIDTH

        shapes.append(
            dict(type="rect", x0=x, x1=x + width, y0=y - 3, y1=y + 3,
                 fillcolor="#e5e7eb", line=dict(width=0))
        )
        shapes.append(
            dict(type="rect", x0=x, x1=x + width * bar_fraction(node, data), y0=y - 3,
                 y1=y + 3, fillcolor=node.color, line=dict(width=2 if node_id == hovered else 0))
        )

        label = node.label
        if node.kind == "category":
            label = f"{label} {'▼' if node.id in expanded else '▶'}"
        annotations.append(
            dict(x=x, y=y - 6, text=f"<b>{label}</b>", showarrow=False, xanchor="left",
                 yanchor="bottom", font=dict(size=11, color="#374151"))
        )
        annotations.append(
            dict(x=x + width, y=y + 5, text=str(node.value), showarrow=False,
                 xanchor="right", yanchor="top", font=dict(size=10, color="#6b7280"))
        )

    fig = go.Figure()
    fig.update_layout(
        shapes=shapes,
        annotations=annotations,
        height=height,
        margin=dict(l=10, r=10, t=10, b=10),
        plot_bgcolor="white",
        xaxis=dict(range=[0, COLUMN_X["Products"] + NODE_WIDTH + 20], visible=False),
        yaxis=dict(range=[height, 0], visible=False),
        showlegend=False,
    )
    return fig
