from .credential_store import CredentialStoreAdapter, SQLAlchemyCredentialStore

__all__ = ["CredentialStoreAdapter", "SQLAlchemyCredentialStore"]
