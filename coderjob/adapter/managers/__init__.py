"""Lifecycle orchestrators for Coder workspaces.

Each module provides async functions that drive one lifecycle flow against
a ``CoderClient`` and a ``CredentialProvider``.  They raise domain
exceptions (``TransportError``, ``CredentialProviderError``) and leave
presentation to the adapter or CLI.
"""
