"""
HashiCorp Vault access for the ledger's secrets.

The only secret the ledger needs is its database DSN. It is read once per
process through an AppRole login and cached; every path is confined to the
'ledger/' mount prefix. Missing configuration fails at startup, not on the
first payment.
"""

import logging
import os
from typing import Any, Dict

import hvac
from hvac.exceptions import Forbidden, InvalidPath, Unauthorized

logger = logging.getLogger(__name__)

_SECRET_PREFIX = "ledger"

_client: "VaultClient | None" = None
_cache: Dict[str, str] = {}


def vault_configured() -> bool:
    """Whether the environment points at a Vault server."""
    return bool(os.getenv("VAULT_ADDR"))


def reset_vault_client() -> None:
    """Forget the shared client and cached secrets (after env changes, and in tests)."""
    global _client
    _client = None
    _cache.clear()


class VaultClient:
    """
    AppRole-authenticated KV v2 reader.

    Arguments default to VAULT_ADDR, VAULT_NAMESPACE, VAULT_ROLE_ID and
    VAULT_SECRET_ID.

    Raises:
        ValueError: If the address or AppRole credentials are missing
        PermissionError: If login is refused
    """

    def __init__(
        self,
        vault_addr: str | None = None,
        namespace: str | None = None,
        role_id: str | None = None,
        secret_id: str | None = None,
    ):
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        namespace = namespace or os.getenv("VAULT_NAMESPACE")
        role_id = role_id or os.getenv("VAULT_ROLE_ID")
        secret_id = secret_id or os.getenv("VAULT_SECRET_ID")

        if not self.vault_addr:
            raise ValueError("VAULT_ADDR environment variable is required")
        if not role_id or not secret_id:
            raise ValueError("VAULT_ROLE_ID and VAULT_SECRET_ID environment variables are required")

        kwargs: Dict[str, Any] = {"url": self.vault_addr}
        if namespace:
            kwargs["namespace"] = namespace
        self.client = hvac.Client(**kwargs)

        try:
            login = self.client.auth.approle.login(role_id=role_id, secret_id=secret_id)
        except Exception as e:
            logger.error("AppRole authentication failed: %s", e)
            raise PermissionError(f"AppRole authentication failed: {e}")

        self.client.token = login["auth"]["client_token"]
        if not self.client.is_authenticated():
            raise PermissionError("Vault authentication failed")

        logger.info("Vault client authenticated against %s", self.vault_addr)

    def read_secret(self, path: str) -> Dict[str, str]:
        """
        All fields of the secret at ledger/<path>.

        Raises:
            PermissionError: Path missing or not readable with this role
        """
        full_path = f"{_SECRET_PREFIX}/{path}"
        try:
            response = self.client.secrets.kv.v2.read_secret_version(
                path=full_path, raise_on_deleted_version=True
            )
        except InvalidPath:
            logger.error("Secret path not found: %s", full_path)
            raise PermissionError(f"Secret path '{full_path}' not found in Vault")
        except (Unauthorized, Forbidden) as e:
            logger.error("Access denied to secret %s: %s", full_path, e)
            raise PermissionError(f"Access denied to secret '{full_path}': {e}")

        return response["data"]["data"]

    def get_secret(self, path: str, field: str) -> str:
        """
        One field of the secret at ledger/<path>.

        Raises:
            PermissionError: Path missing or not readable
            KeyError: Field not present in the secret
        """
        secret = self.read_secret(path)
        if field not in secret:
            raise KeyError(
                f"Field '{field}' not found in secret '{_SECRET_PREFIX}/{path}'. "
                f"Available: {', '.join(secret)}"
            )
        return secret[field]


def get_database_url() -> str:
    """Ledger database DSN from ledger/database, cached for the process."""
    global _client
    key = "database/url"
    if key not in _cache:
        if _client is None:
            _client = VaultClient()
        _cache[key] = _client.get_secret("database", "url")
    return _cache[key]
