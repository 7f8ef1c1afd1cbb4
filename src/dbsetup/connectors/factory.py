from typing import Optional
from urllib.parse import urlparse
from ..config import WizardSettings
from ..domain.interfaces import RemoteStoreClient
from ..domain.models import Credentials
from ..exceptions import ClientConstructionError
from .rest import RestStoreClient
from .sql import SQLStoreClient

def get_client(credentials: Credentials, settings: Optional[WizardSettings] = None) -> RemoteStoreClient:
    """
    Factory function to create the client matching the endpoint.
    http(s) endpoints go through the REST gateway, database URLs through SQLAlchemy.
    """
    settings = settings or WizardSettings()
    endpoint = credentials.endpoint.strip()
    scheme = urlparse(endpoint).scheme.lower()

    if scheme in ("http", "https"):
        return RestStoreClient(credentials, timeout=settings.request_timeout_s)
    elif "://" in endpoint:
        # postgresql://, postgresql+psycopg2://, sqlite:///, oracle+oracledb://, ...
        return SQLStoreClient(credentials, connect_timeout_s=settings.request_timeout_s)
    else:
        raise ClientConstructionError(
            f"Unsupported endpoint {endpoint!r}: expected an https:// project URL or a database URL"
        )
