from . import config
from .fallback import FallbackService, Result
from .gateway import GatewayError, RemoteGateway, UnavailableGateway
from .kv_store import JsonFileKeyValueStore, MemoryKeyValueStore
from .local_store import DuplicateMemberError, LocalStore


def build_service(backend_base=None, store_path=None, offline=False, kv=None, user_id=None):
    """Wire local storage, the API gateway and the fallback service together."""
    kv = kv if kv is not None else JsonFileKeyValueStore(store_path or config.STORE_PATH)
    local = LocalStore(kv)
    remote = UnavailableGateway() if offline else RemoteGateway(backend_base)
    return FallbackService(remote, local, kv, user_id=user_id or config.DEFAULT_USER_ID)


__all__ = [
    "build_service",
    "DuplicateMemberError",
    "FallbackService",
    "GatewayError",
    "JsonFileKeyValueStore",
    "LocalStore",
    "MemoryKeyValueStore",
    "RemoteGateway",
    "Result",
    "UnavailableGateway",
]
