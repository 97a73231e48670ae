# src/erp_integration/odoo_client.py
# XML-RPC client for the Odoo ERP (common + object endpoints), carried over HTTP with requests.

import xmlrpc.client
import requests
from typing import Any, Dict, List, Optional, Sequence
from src.config import Config
from src.utils.logger import logger
from src.api.errors import ConfigurationError, ErpAuthenticationError, ErpIntegrationError

COMMON_ENDPOINT = '/xmlrpc/2/common'
OBJECT_ENDPOINT = '/xmlrpc/2/object'
USER_AGENT = 'Odoo-Sales-Dashboard/1.0'

# A domain is a list of (field, operator, value) triples joined by implicit AND.
Domain = Sequence[Sequence[Any]]


class OdooClient:
    """
    Talks to Odoo's XML-RPC API.

    The client holds no session state. `open_session()` authenticates once and
    returns an `OdooSession` that is meant to live for a single request batch.
    Faults are surfaced as ErpIntegrationError and never retried.
    """

    def __init__(self, url: str, db: str, username: str, password: str, timeout: int = 30):
        self.base_url = url.rstrip('/')
        self.db = db
        self.username = username
        self.password = password
        self.timeout = timeout
        self.common_url = f"{self.base_url}{COMMON_ENDPOINT}"
        self.object_url = f"{self.base_url}{OBJECT_ENDPOINT}"
        logger.debug(f"OdooClient created for {self.base_url} (db={self.db}, secure={self.is_secure})")

    @classmethod
    def from_config(cls, cfg: Config) -> 'OdooClient':
        """Builds a client from the app config. Raises ConfigurationError if settings are missing."""
        missing = cfg.missing_odoo_settings()
        if missing:
            logger.error(f"Missing Odoo environment variables: {', '.join(missing)}")
            raise ConfigurationError(f"Missing Odoo environment variables: {', '.join(missing)}")
        return cls(cfg.ODOO_URL, cfg.ODOO_DB, cfg.ODOO_USERNAME, cfg.ODOO_PASSWORD, cfg.ODOO_TIMEOUT)

    @property
    def is_secure(self) -> bool:
        return self.base_url.startswith('https')

    def _rpc(self, url: str, method: str, params: tuple) -> Any:
        """Marshals one XML-RPC call, posts it and unmarshals the response."""
        payload = xmlrpc.client.dumps(params, methodname=method, allow_none=True)
        headers = {
            "Content-Type": "text/xml",
            "Accept": "text/xml",
            "User-Agent": USER_AGENT,
        }
        logger.debug(f"XML-RPC call {method} -> {url}")
        try:
            response = requests.post(url, data=payload.encode('utf-8'), headers=headers, timeout=self.timeout)
            response.raise_for_status()
            result, _ = xmlrpc.client.loads(response.content, use_builtin_types=True)
        except xmlrpc.client.Fault as e:
            logger.error(f"Odoo fault on {method} ({url}): {e.faultString}")
            raise ErpIntegrationError(e.faultString) from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"HTTP error {status_code} from Odoo ({method} {url}): {e}")
            raise ErpIntegrationError(f"Odoo request failed with status {status_code}: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error connecting to Odoo ({method} {url}): {e}")
            raise ErpIntegrationError(f"Network error connecting to Odoo: {e}") from e
        except xmlrpc.client.ResponseError as e:
            logger.error(f"Malformed XML-RPC response from Odoo ({method} {url}): {e}")
            raise ErpIntegrationError(f"Malformed response from Odoo: {e}") from e
        except Exception as e:
            # expat raises its own error types on non-XML bodies
            logger.error(f"Unexpected error during Odoo call ({method} {url}): {e}", exc_info=True)
            raise ErpIntegrationError(f"Unexpected error during Odoo call: {e}") from e

        return result[0] if result else None

    def authenticate(self) -> int:
        """Returns the user id for the configured credentials."""
        uid = self._rpc(self.common_url, 'authenticate', (self.db, self.username, self.password, {}))
        if not uid:
            logger.warning(f"Odoo authentication returned no UID for user '{self.username}' on db '{self.db}'.")
            raise ErpAuthenticationError("Authentication failed: No UID returned (check credentials)")
        logger.info(f"Authenticated with Odoo as uid {uid}.")
        return uid

    def open_session(self) -> 'OdooSession':
        """Authenticates once and returns a session for the current request batch."""
        return OdooSession(self, self.authenticate())

    def execute_kw(self, uid: int, model: str, method: str,
                   args: Optional[List[Any]] = None, kwargs: Optional[Dict[str, Any]] = None) -> Any:
        params = (self.db, uid, self.password, model, method, list(args or []), dict(kwargs or {}))
        return self._rpc(self.object_url, 'execute_kw', params)

    def check_connection(self) -> Dict[str, Any]:
        """Authenticates and reports where the dashboard is connected."""
        uid = self.authenticate()
        return {"url": self.base_url, "db": self.db, "uid": uid}


class OdooSession:
    """An authenticated, short-lived handle on the object endpoint."""

    def __init__(self, client: OdooClient, uid: int):
        self.client = client
        self.uid = uid

    def call(self, model: str, method: str, args: Optional[List[Any]] = None,
             kwargs: Optional[Dict[str, Any]] = None) -> Any:
        """Generic execute_kw call."""
        logger.debug(f"Odoo call {model}.{method}")
        return self.client.execute_kw(self.uid, model, method, args, kwargs)

    def search_read(self, model: str, domain: Domain, fields: List[str],
                    limit: Optional[int] = None) -> List[Dict[str, Any]]:
        kwargs: Dict[str, Any] = {"fields": fields}
        if limit is not None:
            kwargs["limit"] = limit
        records = self.call(model, 'search_read', [[list(term) for term in domain]], kwargs)
        logger.debug(f"search_read {model} returned {len(records or [])} record(s).")
        return records or []
