"""Credential providers for workspace application credentials."""

from coderjob.adapter.credentials.base import (
    CredentialProvider,
    CredentialProviderError,
    CredentialsNotFoundError,
)
from coderjob.adapter.credentials.local import LocalCredentialStore

__all__ = ["CredentialProvider", "CredentialProviderError", "CredentialsNotFoundError", "LocalCredentialStore"]
