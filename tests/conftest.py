import httpx
import pytest

from nexora.api_client import ApiClient


@pytest.fixture
def make_client():
    """Build an ApiClient whose requests are answered by `handler`."""
    clients = []

    def _make(handler):
        client = ApiClient(base_url="http://backend.test", transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def intent_rows():
    return [
        {"companyName": "Acme", "intentStatus": "High"},
        {"companyName": "Zeta", "intentStatus": "Low"},
    ]


@pytest.fixture
def technographics_rows():
    return [
        {"companyName": "Acme", "industry": "Retail", "region": "India", "category": "AI/ML", "technology": "TensorFlow"},
        {"companyName": "Acme", "industry": "Retail", "region": "India", "category": "AI/ML", "technology": "PyTorch"},
        {"companyName": "Acme", "industry": "Retail", "region": "India", "category": "Big Data", "technology": "Spark"},
        {"companyName": "Zeta", "industry": "Banking", "region": "Germany", "category": "Big Data", "technology": "Spark"},
        {"companyName": "Orbit", "industry": None, "region": None, "category": None, "technology": None},
    ]
