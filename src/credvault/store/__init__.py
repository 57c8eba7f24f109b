from .users import StoredCredentials, UserRecord, UserStore

__all__ = ["UserStore", "UserRecord", "StoredCredentials"]
