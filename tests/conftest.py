"""
Pytest configuration and shared fixtures.
"""
import pytest

from folio.personal.defaults import default_portfolio
from folio.personal.models import PortfolioModel
from folio.storage.backends import JsonFileStorage, MemoryStorage
from folio.storage.json_store import PortfolioStore


@pytest.fixture
def temp_storage_dir(tmp_path):
    """Create a temporary storage directory for testing."""
    storage_dir = tmp_path / "test_storage"
    storage_dir.mkdir()
    return storage_dir


@pytest.fixture
def file_storage(temp_storage_dir):
    return JsonFileStorage(str(temp_storage_dir))


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def store(memory_storage):
    """Loaded store backed by memory storage."""
    portfolio_store = PortfolioStore(memory_storage)
    portfolio_store.load()
    return portfolio_store


@pytest.fixture
def sample_portfolio():
    """Default portfolio with one record in every collection."""
    return PortfolioModel.model_validate({
        **default_portfolio().to_document(),
        "name": "Ada Lovelace",
        "heroImage": "https://example.com/hero.png",
        "experiences": [
            {"id": 1, "title": "Engineer", "company": "Analytical Co.", "date": "1843", "description": "Notes"}
        ],
        "education": [
            {"id": 2, "degree": "Mathematics", "institution": "Home", "date": "1830", "description": ""}
        ],
        "projects": [
            {"id": 3, "title": "Bernoulli", "description": "Program", "image": "", "tags": ["math"],
             "liveUrl": "#", "githubUrl": "#"}
        ],
        "certificates": [
            {"id": 4, "title": "Cert", "issuer": "Society", "date": "1840", "credentialUrl": "#", "image": ""}
        ],
    })
