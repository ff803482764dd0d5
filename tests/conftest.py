import httpx
import pytest
from fastapi.testclient import TestClient

from quote_portal.core.dependencies import get_moveware_client_factory
from quote_portal.main import app
from quote_portal.modules.assistant.session_store import get_conversation_store
from quote_portal.modules.companies.database import BrandingSettings, Company, DatabaseManager, set_db_manager
from quote_portal.modules.moveware.client import MovewareClient
from quote_portal.modules.moveware.models import Credentials

TENANT = "demo-co"
BASE_URL = "https://mw.test"


@pytest.fixture
def db_manager(tmp_path):
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'portal.db'}")
    set_db_manager(manager)
    yield manager
    set_db_manager(None)
    manager.dispose()


@pytest.fixture
def db(db_manager):
    session = db_manager.get_session()
    yield session
    session.close()


@pytest.fixture
def client(db_manager):
    get_conversation_store().clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    get_conversation_store().clear()


@pytest.fixture
def seeded_company(db):
    """Tenant TENANT with Moveware credentials configured."""
    company = Company(tenant_id=TENANT, name="Crown Relocations", brand_code="CROWN")
    company.branding_settings = BrandingSettings(
        mw_username="api-user",
        mw_password="api-secret",
        primary_color="#112233",
        font_family="Roboto",
    )
    db.add(company)
    db.commit()
    return company


@pytest.fixture
def credentials():
    return Credentials(co_id=TENANT, username="api-user", password="api-secret", base_url=BASE_URL)


def _moveware_path(request: httpx.Request) -> str:
    """Path below /{coId}/api/, e.g. "jobs/111505/inventory"."""
    prefix = f"/{TENANT}/api/"
    path = request.url.path
    return path[len(prefix):] if path.startswith(prefix) else path


@pytest.fixture
def mw_path():
    return _moveware_path


@pytest.fixture
def mock_moveware():
    """
    Route the app's Moveware client through an httpx.MockTransport.

    Call the fixture value with a handler(request) -> httpx.Response; it
    returns the list of recorded requests.
    """
    calls = []

    def install(handler):
        def recording(request):
            calls.append(request)
            return handler(request)

        transport = httpx.MockTransport(recording)

        def factory(creds):
            return MovewareClient(creds.model_copy(update={"base_url": BASE_URL}), transport=transport)

        app.dependency_overrides[get_moveware_client_factory] = lambda: factory
        return calls

    yield install
    app.dependency_overrides.pop(get_moveware_client_factory, None)
