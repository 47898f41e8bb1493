from pathlib import Path
from typing import Optional
import logging
import os

from laundry.domain.entities import Repository
from laundry.services.authentication import SessionManager
from laundry.services.orders import OrderService
from laundry.storage.json_kv_store import JsonFileKeyValueStore
from laundry.storage.kv_store import KeyValueStore, MemoryKeyValueStore
from laundry.storage.record_store import RecordStore

logger = logging.getLogger(__name__)

DATA_ROOT_ENV_VAR = "LAUNDRY_DATA_DIR"
STORAGE_ENV_VAR = "LAUNDRY_STORAGE"
LOG_LEVEL_ENV_VAR = "LAUNDRY_LOG_LEVEL"

_REPO_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DATA_DIR = _REPO_ROOT / "data"

_store: Optional[KeyValueStore] = None
_record_store: Optional[RecordStore] = None
_repository: Optional[Repository] = None
_session_manager: Optional[SessionManager] = None
_order_service: Optional[OrderService] = None


def get_log_level() -> str:
    return os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()


def get_data_dir() -> Path:
    env_path = os.environ.get(DATA_ROOT_ENV_VAR)
    if env_path:
        d = Path(env_path).expanduser()
    else:
        d = _DEFAULT_DATA_DIR
    d.mkdir(parents=True, exist_ok=True)
    return d


def get_key_value_store() -> KeyValueStore:
    global _store
    if _store is None:
        backend = os.environ.get(STORAGE_ENV_VAR, "json").lower()
        if backend == "memory":
            _store = MemoryKeyValueStore()
        elif backend == "json":
            _store = JsonFileKeyValueStore(get_data_dir())
        else:
            raise ValueError(f"Unknown storage backend '{backend}' in {STORAGE_ENV_VAR}")
        logger.info(f"Using {backend} storage backend")
    return _store


def get_record_store() -> RecordStore:
    global _record_store
    if _record_store is None:
        _record_store = RecordStore(get_key_value_store())
        _record_store.initialize()
    return _record_store


def get_repository() -> Repository:
    global _repository
    if _repository is None:
        _repository = Repository(get_record_store())
    return _repository


def get_session_manager() -> SessionManager:
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager(get_repository())
        _session_manager.restore()
    return _session_manager


def get_order_service() -> OrderService:
    global _order_service
    if _order_service is None:
        _order_service = OrderService(get_repository())
    return _order_service
