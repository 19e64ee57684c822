"""Buying-group org charts.

Parses the buying-group CSV into people per company and lays each company
out as a top-down tree in unit coordinates: boxes are ``box_width`` wide,
levels stack downwards from y = 1 and subtrees are centred under their
parents.
"""

import io
import logging
import re
from dataclasses import dataclass, field

import pandas as pd
import plotly.graph_objects as go

from nexora.models import OrgPerson

log = logging.getLogger(__name__)

BOX_WIDTH = 0.85
BOX_HEIGHT = 0.42
SMALL_BOX_WIDTH = 0.58
SMALL_BOX_HEIGHT = 0.34
SMALL_CHART_THRESHOLD = 5
HORIZONTAL_GAP = 0.08
VERTICAL_GAP = 0.15
TOP_PADDING = 0.12
SIDE_PADDING = 0.05
X_OFFSET = 0.8
AXIS_PADDING = 0.10
MIN_VIEWPORT_SPAN = 0.9
MAX_CHARS_PER_LINE = 16
MAX_NAME_LINES = 1
MAX_ROLE_LINES = 2

# hierarchy -> (fill, font)
HIERARCHY_COLORS = {
    "decision maker": ("#0070C0", "#FFFFFF"),
    "influencer": ("#00B0F0", "#FFFFFF"),
    "direct reportee": ("#CCECFF", "#002060"),
}
OTHER_COLORS = ("#000000", "#FFFFFF")
LINE_COLOR = "#355A9C"

CSV_COLUMNS = {
    "Unique ID": "id",
    "Name": "name",
    "Role": "designation",
    "email": "email",
    "Linkedin": "linkedin",
    "Reports To": "reportsTo",
    "Category": "category",
    "hierarchy": "hierarchy",
}


def parse_org_chart_csv(text: str) -> dict[str, list[OrgPerson]]:
    """Group the buying-group CSV by `Company Name`."""
    df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]
    if "Company Name" not in df.columns:
        raise ValueError("Missing expected column: 'Company Name'")

    companies: dict[str, list[OrgPerson]] = {}
    for record in df.to_dict(orient="records"):
        company = record.get("Company Name", "").strip() or "Unknown"
        values = {
            field_name: record[column].strip()
            for column, field_name in CSV_COLUMNS.items()
            if record.get(column, "").strip()
        }
        companies.setdefault(company, []).append(OrgPerson(**values))
    return companies


def parse_person_details(payload: dict) -> dict[str, list[OrgPerson]]:
    return {
        company: [OrgPerson.model_validate(p) for p in people]
        for company, people in payload.items()
        if isinstance(people, list)
    }


def companies_from_people(people_by_company: dict) -> list[str]:
    return sorted(people_by_company)


def sanitize_filename(name: str) -> str:
    name = re.sub(r"[^\w\s-]", "", str(name)).strip()
    name = re.sub(r"[-\s]+", "_", name)
    return name or "untitled_chart"


def wrap_text(text, max_chars: int, max_lines: int | None = None) -> str:
    text = str(text)
    if "<br>" in text:
        return text

    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= max_chars:
            current += " " + word
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)

    if max_lines is not None and len(lines) > max_lines:
        lines = lines[:max_lines]
        if lines:
            lines[-1] = lines[-1][: max(1, max_chars - 3)] + "..."
    return "<br>".join(lines)


@dataclass
class Employee:
    name: str
    role: str
    hierarchy: str
    reports_to: str | None = None
    children: list[str] = field(default_factory=list)
    level: int = -1
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0


@dataclass
class OrgTree:
    employees: dict[str, Employee]
    roots: list[str]
    edges: list[tuple[str, str]]


def build_tree(people: list[OrgPerson]) -> OrgTree:
    names = {p.name.strip() for p in people if p.name.strip()}
    employees: dict[str, Employee] = {}
    for person in people:
        name = person.name.strip() or "Unnamed"
        manager = person.reportsTo.strip() if person.reportsTo else None
        if manager not in names:
            manager = None
        employees[name] = Employee(
            name=name,
            role=person.designation or "N/A",
            hierarchy=(person.hierarchy or "Other").strip(),
            reports_to=manager,
        )

    managed = set()
    for name, emp in employees.items():
        if emp.reports_to and emp.reports_to in employees and emp.reports_to != name:
            employees[emp.reports_to].children.append(name)
            managed.add(name)

    roots = [name for name in employees if name not in managed]
    if not roots and employees:
        roots = [next(iter(employees))]

    edges = [(name, child) for name, emp in employees.items() for child in emp.children]
    return OrgTree(employees, roots, edges)


def box_size(count: int) -> tuple[float, float]:
    if 0 < count <= SMALL_CHART_THRESHOLD:
        return SMALL_BOX_WIDTH, SMALL_BOX_HEIGHT
    return BOX_WIDTH, BOX_HEIGHT


def assign_levels(tree: OrgTree, box_height: float = BOX_HEIGHT) -> int:
    """Breadth-first levels from the roots; sets y and returns the deepest level."""
    employees = tree.employees
    queue = []
    seen = set()
    for root in tree.roots:
        if root in employees:
            employees[root].level = 0
            queue.append((root, 0))
            seen.add(root)

    max_level = 0
    head = 0
    while head < len(queue):
        name, level = queue[head]
        head += 1
        max_level = max(max_level, level)
        for child in employees[name].children:
            if child not in seen:
                employees[child].level = level + 1
                queue.append((child, level + 1))
                seen.add(child)

    for emp in employees.values():
        if emp.level != -1:
            emp.y = 1.0 - TOP_PADDING - emp.level * (box_height + VERTICAL_GAP) - box_height / 2
    return max_level


def _tree_children(node: Employee, employees: dict[str, Employee]) -> list[str]:
    # BFS tree edges only, so reporting cycles are skipped
    return [c for c in node.children if employees[c].level == node.level + 1]


def subtree_width(name: str, employees: dict[str, Employee], box_width: float = BOX_WIDTH) -> float:
    node = employees[name]
    if node.width > 0:
        return node.width
    children = _tree_children(node, employees)
    if not children:
        width = box_width
    else:
        width = sum(subtree_width(c, employees, box_width) for c in children)
        width += (len(children) - 1) * HORIZONTAL_GAP
    node.width = max(width, box_width)
    return node.width


def assign_x(name: str, slot_start: float, employees: dict[str, Employee], box_width: float = BOX_WIDTH):
    node = employees[name]
    children = _tree_children(node, employees)
    if not children:
        node.x = slot_start + box_width / 2 + X_OFFSET
        return

    span = sum(employees[c].width for c in children)
    span += (len(children) - 1) * HORIZONTAL_GAP
    centre = slot_start + node.width / 2
    node.x = centre + X_OFFSET

    child_start = centre - span / 2
    for child in children:
        assign_x(child, child_start, employees, box_width)
        child_start += employees[child].width + HORIZONTAL_GAP


def layout_x(tree: OrgTree, box_width: float = BOX_WIDTH) -> None:
    employees = tree.employees
    roots = sorted(r for r in tree.roots if r in employees)
    if not roots:
        return

    for root in roots:
        subtree_width(root, employees, box_width)
    total = sum(employees[r].width for r in roots) + (len(roots) - 1) * HORIZONTAL_GAP

    offset = SIDE_PADDING
    if 0 < total < 1.0 - 2 * SIDE_PADDING:
        offset = (1.0 - total) / 2

    for root in roots:
        assign_x(root, offset, employees, box_width)
        offset += employees[root].width + HORIZONTAL_GAP


def layout_tree(people: list[OrgPerson]) -> tuple[OrgTree, float, float]:
    tree = build_tree(people)
    box_width, box_height = box_size(len(tree.employees))
    assign_levels(tree, box_height)
    layout_x(tree, box_width)
    return tree, box_width, box_height


def _message_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=message, x=0.5, y=0.5, showarrow=False, font=dict(size=16))
    fig.update_layout(
        height=500,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        plot_bgcolor="white",
    )
    return fig


def chart_title(company: str, location: str = "") -> str:
    location = str(location or "").strip()
    return f"{company} ({location})" if location else str(company)


def org_chart_figure(people: list[OrgPerson], company: str = "Organization", location: str = "") -> go.Figure:
    title = chart_title(company, location)
    if not people:
        return _message_figure(f"No Employee Data for {title}")

    tree, box_width, box_height = layout_tree(people)
    positions = {
        name: (emp.x, emp.y) for name, emp in tree.employees.items() if emp.level != -1
    }
    if not positions:
        return _message_figure(f"{title} - No Visualizable Chart Data")

    min_x = min(x for x, _ in positions.values()) - box_width / 2
    max_x = max(x for x, _ in positions.values()) + box_width / 2
    min_y = min(y for _, y in positions.values()) - box_height / 2
    max_y = max(y for _, y in positions.values()) + box_height / 2

    x_range = [min_x - AXIS_PADDING, max_x + AXIS_PADDING]
    y_range = [min_y - AXIS_PADDING, max_y + AXIS_PADDING]
    if x_range[1] - x_range[0] < MIN_VIEWPORT_SPAN:
        mid = sum(x_range) / 2
        x_range = [mid - MIN_VIEWPORT_SPAN / 2, mid + MIN_VIEWPORT_SPAN / 2]
    if y_range[1] - y_range[0] < MIN_VIEWPORT_SPAN:
        mid = sum(y_range) / 2
        y_range = [mid - MIN_VIEWPORT_SPAN / 2, mid + MIN_VIEWPORT_SPAN / 2]

    line_x: list = []
    line_y: list = []
    roots = [r for r in tree.roots if r in positions]
    if len(roots) > 1:
        top = positions[roots[0]][1] + box_height / 2 + VERTICAL_GAP / 3
        xs = [positions[r][0] for r in roots]
        line_x += [min(xs), max(xs), None]
        line_y += [top, top, None]
        for r in roots:
            line_x += [positions[r][0], positions[r][0], None]
            line_y += [top, positions[r][1] + box_height / 2, None]

    for parent, child in tree.edges:
        if parent in positions and child in positions:
            x0, y0 = positions[parent]
            x1, y1 = positions[child]
            junction = y0 - box_height / 2 - VERTICAL_GAP / 3
            line_x += [x0, x0, x1, x1, None]
            line_y += [y0 - box_height / 2, junction, junction, y1 + box_height / 2, None]

    fig = go.Figure()
    for label, (fill, _) in [
        ("Decision Maker", HIERARCHY_COLORS["decision maker"]),
        ("Influencer", HIERARCHY_COLORS["influencer"]),
        ("Direct Reportee", HIERARCHY_COLORS["direct reportee"]),
    ]:
        fig.add_trace(
            go.Scatter(x=[None], y=[None], mode="markers", name=label,
                       marker=dict(size=15, color=fill, symbol="square"))
        )
    if line_x:
        fig.add_trace(
            go.Scatter(x=line_x, y=line_y, mode="lines", hoverinfo="none",
                       showlegend=False, line=dict(color=LINE_COLOR, width=2))
        )

    for name, (x, y) in positions.items():
        emp = tree.employees[name]
        fill, font = HIERARCHY_COLORS.get(emp.hierarchy.lower(), OTHER_COLORS)
        fig.add_shape(
            type="rect",
            x0=x - box_width / 2,
            x1=x + box_width / 2,
            y0=y - box_height / 2,
            y1=y + box_height / 2,
            fillcolor=fill,
            line=dict(color=fill, width=0),
        )
        label = (
            f"<b>{wrap_text(emp.name, MAX_CHARS_PER_LINE, MAX_NAME_LINES)}</b><br>"
            f"{wrap_text(emp.role, MAX_CHARS_PER_LINE, MAX_ROLE_LINES)}"
        )
        fig.add_annotation(x=x, y=y, text=label, showarrow=False,
                           font=dict(size=12, color=font, family="Calibri, Arial"))

    fig.update_layout(
        title=dict(text=title, x=0.5, xanchor="center"),
        showlegend=True,
        legend=dict(orientation="h", yanchor="bottom", y=1.0, x=0.5, xanchor="center"),
        height=500,
        margin=dict(l=20, r=20, t=100, b=20),
        plot_bgcolor="white",
        xaxis=dict(range=x_range, visible=False),
        yaxis=dict(range=y_range, visible=False, scaleanchor="x"),
    )
    log.debug("Laid out %d people for %s", len(positions), title)
    return fig
