"""Dashboard sections, keyed by dashboard then menu label."""

from nexora.views import (
    buyer_group,
    buying_group,
    financial,
    growth,
    intent,
    market_summary,
    martech_summary,
    mutual_fund,
    ntp,
    product_catalogue,
    renewal,
    stock_performance,
    technographics,
)

MENUS = {
    "Martech": {
        "Technographics": technographics.render,
        "Renewal Intelligence": renewal.render,
        "Intent": intent.render,
        "Buying Group": buying_group.render,
        "NTP®": ntp.render,
        "Product Catalogue": product_catalogue.render,
        "Summary": martech_summary.render,
    },
    "Market": {
        "Summary": market_summary.render,
        "Financial": financial.render,
        "Stock Performance": stock_performance.render,
        "Buyer Group": buyer_group.render,
        "Growth": growth.render,
        "Mutual Fund": mutual_fund.render,
    },
}

DEFAULT_DASHBOARD = "Martech"
DEFAULT_SECTION = "Technographics"


def get_view(dashboard: str, section: str):
    menu = MENUS.get(dashboard) or MENUS[DEFAULT_DASHBOARD]
    return menu.get(section) or menu.get("Summary") or next(iter(menu.values()))
