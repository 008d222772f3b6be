"""
Validation data repository.

Keeps the validation data collection in memory together with its parent
links and lookup indexes, persists it through a RepositoryStorage and
rebinds rule descriptors through the rule store.
"""

import threading
from typing import Iterable

from src.core.config import CheckpointConfig
from src.core.exceptions import MandatoryFieldError, PersistenceError, RepositoryLoadError
from src.core.models import ParamType, ReqUrl, ValidationData
from src.core.rules import ValidationRuleStore
from src.observability.logger import get_logger, log_operation
from src.observability.metrics import (
    flush_duration_seconds,
    record_load_failure,
    record_operation,
    record_unbound_rules,
    repository_records,
    set_gauge,
    track_duration,
)

from .hierarchy import HierarchyResolver
from .index import ValidationDataIndex
from .storage import JsonFileStorage, RepositoryStorage

logger = get_logger(__name__)


class ValidationDataRepository:
    """
    In-memory, file-backed store of validation data records.

    The record list and the index are guarded as one unit by a re-entrant
    lock: every public method holds it, so flushes never interleave and a
    query never observes a half-applied mutation. find_all() hands out a
    snapshot list; the records themselves are shared.

    Ids are assigned from a running maximum that never decreases during
    the lifetime of the repository object, so ids are not reused even after
    the highest record is deleted and the file is reloaded.
    """

    def __init__(
        self,
        storage: RepositoryStorage,
        rule_store: ValidationRuleStore,
        index: ValidationDataIndex | None = None,
        name: str = "default",
    ):
        """
        Initialize the repository. Call refresh() before serving queries.

        Args:
            storage: Persistence adapter for the full collection
            rule_store: Source of rule definitions for rule sync
            index: Index instance to maintain (a fresh one by default)
            name: Repository name used in logs and metrics
        """
        self.storage = storage
        self.rule_store = rule_store
        self.index = index if index is not None else ValidationDataIndex()
        self.name = name

        self._resolver = HierarchyResolver()
        self._lock = threading.RLock()
        self._datas: list[ValidationData] | None = None
        self._current_max_id = 0

    @classmethod
    def from_config(cls, config: CheckpointConfig) -> "ValidationDataRepository":
        """
        Build a loaded repository backed by the configured JSON file and rule definitions.

        Args:
            config: Runtime configuration

        Returns:
            Repository on which refresh() has already run
        """
        rule_store = ValidationRuleStore(config_path=config.rules_path) if config.rules_path else ValidationRuleStore()
        repository = cls(
            storage=JsonFileStorage(config.repository_path),
            rule_store=rule_store,
            name=config.repository_name,
        )
        repository.refresh()
        return repository

    # =======================
    # LOADING
    # =======================

    def refresh(self) -> None:
        """
        Reload the collection from storage and rebuild every derived view.

        A load failure after the first successful load keeps the cached
        collection in service.

        Raises:
            RepositoryLoadError: If the file is unreadable and nothing is cached yet
        """
        with self._lock:
            with log_operation("Refreshing repository", logger=logger, repository=self.name):
                try:
                    self._datas = self._read_storage()
                except RepositoryLoadError as e:
                    has_cache = self._datas is not None
                    record_load_failure(self.name, used_cache=has_cache)
                    if not has_cache:
                        logger.error(f"{e.message}; no cached collection to fall back to")
                        raise
                    logger.error(f"{e.message}; keeping {len(self._datas)} cached records")

                self._current_id_init()
                self._index_init()
                self.datas_rule_sync()
            record_operation(self.name, "refresh")

    def _read_storage(self) -> list[ValidationData]:
        """Read from storage and resolve parent links."""
        datas = self.storage.read()
        self._resolver.resolve(datas)
        return datas

    def _current_id_init(self) -> None:
        loaded_max = max((d.id for d in self._datas), default=0)
        self._current_max_id = max(self._current_max_id, loaded_max)

    def _index_init(self) -> None:
        self.index.refresh()
        for d in self._datas:
            self.index.add_index(d)
        self._update_record_gauge()

    def _ensure_loaded(self) -> list[ValidationData]:
        if self._datas is None:
            self.refresh()
        return self._datas

    def _update_record_gauge(self) -> None:
        set_gauge(repository_records, len(self._datas or ()), repository=self.name)

    # =======================
    # QUERIES
    # =======================

    def find_all(self, use_cache: bool = True) -> list[ValidationData]:
        """
        Return every record.

        Args:
            use_cache: True for a snapshot of the in-memory collection,
                False for a fresh read from storage (not cached)

        Returns:
            List of records; mutating the list does not affect the repository

        Raises:
            RepositoryLoadError: If use_cache is False and the file cannot be read
        """
        with self._lock:
            if use_cache:
                return list(self._ensure_loaded())
            return self._read_storage()

    def find_by_id(self, id: int | None) -> ValidationData | None:
        with self._lock:
            self._ensure_loaded()
            return self.index.find_by_id(id)

    def find_by_ids(self, ids: Iterable[int]) -> list[ValidationData]:
        wanted = set(ids)
        with self._lock:
            return [d for d in self._ensure_loaded() if d.id in wanted]

    def find_by_method_and_url(self, method: str, url: str) -> list[ValidationData]:
        with self._lock:
            self._ensure_loaded()
            return self.index.find_by_method_and_url(method, url)

    def find_by_param_type_and_method_and_url(
        self, param_type: ParamType, method: str, url: str
    ) -> list[ValidationData]:
        return [d for d in self.find_by_method_and_url(method, url) if d.param_type == param_type]

    def find_by_method_and_url_and_name(self, method: str, url: str, name: str) -> list[ValidationData]:
        """Records of the route whose name matches case-insensitively."""
        return [d for d in self.find_by_method_and_url(method, url) if d.matches_name(name)]

    def find_by_param_type_and_method_and_url_and_name(
        self, param_type: ParamType, method: str, url: str, name: str
    ) -> list[ValidationData]:
        return [
            d for d in self.find_by_method_and_url_and_name(method, url, name)
            if d.param_type == param_type
        ]

    def find_by_param_type_and_method_and_url_and_name_and_parent_id(
        self, param_type: ParamType, method: str, url: str, name: str, parent_id: int | None
    ) -> ValidationData | None:
        """
        Find the record for a parameter nested under a given parent.

        A parent_id of None only matches records that have no parent.
        At most one match is expected; the first one wins.
        """
        candidates = self.find_by_param_type_and_method_and_url_and_name(param_type, method, url, name)
        return _first_with_parent_id(candidates, parent_id)

    def find_by_method_and_url_and_name_and_parent_id(
        self, method: str, url: str, name: str, parent_id: int | None
    ) -> ValidationData | None:
        candidates = self.find_by_method_and_url_and_name(method, url, name)
        return _first_with_parent_id(candidates, parent_id)

    def find_by_parent_id(self, id: int) -> list[ValidationData]:
        with self._lock:
            return [d for d in self._ensure_loaded() if d.parent_id is not None and d.parent_id == id]

    def find_all_url(self) -> list[ReqUrl]:
        with self._lock:
            self._ensure_loaded()
            return self.index.get_url_list()

    # =======================
    # MUTATIONS
    # =======================

    def save(self, data: ValidationData) -> ValidationData:
        """
        Insert a new record or replace the rule list of an existing one.

        Args:
            data: Record to save; an id of 0 or one that is not stored yet gets a new id

        Returns:
            The stored record (data itself for an insert)

        Raises:
            MandatoryFieldError: If param_type, url, method, type or type_class is unset
        """
        missing = data.missing_mandatory_fields()
        if missing:
            record_operation(self.name, "save", success=False)
            raise MandatoryFieldError(missing)

        with self._lock:
            self._ensure_loaded()
            exist_data = self.index.find_by_id(data.id) if data.id > 0 else None

            if exist_data is None:
                saved = self._add_data(data)
            else:
                exist_data.validation_rules = list(data.validation_rules)
                saved = exist_data

        record_operation(self.name, "save")
        return saved

    def _add_data(self, data: ValidationData) -> ValidationData:
        self._current_max_id += 1
        data.id = self._current_max_id
        self._resolver.resolve_one(data, self.index.find_by_id)

        self._datas.append(data)
        self.index.add_index(data)
        self._resolver.attach_children(data, self._datas)
        self._update_record_gauge()

        logger.debug(f"Added validation data {data.id}: {data.method} {data.url} {data.name}")
        return data

    def save_all(self, datas: list[ValidationData]) -> list[ValidationData]:
        """Save each record in order. Not atomic: earlier saves stay applied on failure."""
        for d in datas:
            self.save(d)
        return datas

    def delete(self, data: ValidationData) -> None:
        """Remove the record with data.id. Unknown ids are ignored."""
        with self._lock:
            datas = self._ensure_loaded()
            exist_data = self.index.find_by_id(data.id)
            if exist_data is None:
                return

            datas[:] = [d for d in datas if d is not exist_data]
            self.index.remove_index(exist_data)
            self._resolver.detach_children(exist_data, datas)
            self._update_record_gauge()

        record_operation(self.name, "delete")

    def delete_all(self, datas: list[ValidationData]) -> None:
        for d in datas:
            self.delete(d)

    def truncate(self) -> None:
        """
        Empty the repository, persist the empty collection and reload it.

        Raises:
            PersistenceError: If the empty collection cannot be written
                (the previous records stay in memory)
        """
        with self._lock:
            logger.warning(f"Truncating repository '{self.name}'")
            previous = self._ensure_loaded()
            self._datas = []
            self.index.refresh()
            try:
                self.flush()
            except PersistenceError:
                self._datas = previous
                self._index_init()
                self.datas_rule_sync()
                record_operation(self.name, "truncate", success=False)
                raise
            self.refresh()
        record_operation(self.name, "truncate")

    def flush(self) -> None:
        """
        Write the in-memory collection to storage, then resync rule bindings.

        Raises:
            PersistenceError: If serialization or the file write fails
                (rule sync is skipped)
        """
        with self._lock:
            datas = self._ensure_loaded()
            for d in datas:
                d.minimalize()

            try:
                with log_operation(
                    "Flushing repository", logger=logger,
                    repository=self.name, records=len(datas), location=self.storage.location,
                ), track_duration(flush_duration_seconds, repository=self.name):
                    self.storage.write(datas)
            except Exception:
                record_operation(self.name, "flush", success=False)
                raise

            self.datas_rule_sync()
        record_operation(self.name, "flush")

    def datas_rule_sync(self) -> None:
        """Rebind every record's rule descriptors to the current rule definitions."""
        with self._lock:
            definitions = self.rule_store.get_rule_map()
            for d in self._datas or ():
                unbound = d.rule_sync(definitions)
                if unbound:
                    logger.debug(f"Validation data {d.id} has unknown rule types: {unbound}")
                    record_unbound_rules(self.name, unbound)

    def __len__(self) -> int:
        with self._lock:
            return len(self._datas or ())


def _first_with_parent_id(datas: list[ValidationData], parent_id: int | None) -> ValidationData | None:
    for d in datas:
        if d.parent_id == parent_id:
            return d
    return None
