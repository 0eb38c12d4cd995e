# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    get_database_url,
    vault_configured,
)
from clients.postgres_client import PostgresClient, Transaction
