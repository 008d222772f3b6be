"""
Persistence adapters for the validation data collection.

The durable form is a JSON array of records. Transient fields (parent
links, rule definitions bound by rule sync) are never written.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from src.core.exceptions import PersistenceError, RepositoryLoadError
from src.core.models import ValidationData
from src.observability.logger import get_logger
from src.utils.file_util import read_file_to_string, write_string_to_file

logger = get_logger(__name__)

_DATA_LIST_ADAPTER = TypeAdapter(list[ValidationData])


class RepositoryStorage(ABC):
    """Reads and writes the whole validation data collection."""

    @abstractmethod
    def read(self) -> list[ValidationData]:
        """
        Read the full collection.

        Returns:
            Records in stored order (empty when nothing was stored yet)

        Raises:
            RepositoryLoadError: If stored data exists but cannot be read
        """
        pass

    @abstractmethod
    def write(self, datas: list[ValidationData]) -> None:
        """
        Replace the stored collection.

        Raises:
            PersistenceError: If the collection cannot be serialized or written
        """
        pass

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location used in logs."""
        pass


class JsonFileStorage(RepositoryStorage):
    """
    Stores the collection as an indented JSON array in a single UTF-8 file.

    A missing or blank file is an empty collection. A file that exists but
    cannot be read or parsed, or that holds a record without a positive id,
    raises RepositoryLoadError.
    """

    def __init__(self, path: str | Path, indent: int | None = 2):
        self.path = Path(path)
        self.indent = indent

    @property
    def location(self) -> str:
        return str(self.path.absolute())

    def read(self) -> list[ValidationData]:
        try:
            text = read_file_to_string(self.path)
        except FileNotFoundError:
            logger.info(f"Repository file not found, starting empty: {self.location}")
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise RepositoryLoadError(self.location, str(e)) from e

        if not text.strip():
            return []

        try:
            datas = _DATA_LIST_ADAPTER.validate_json(text)
        except ValidationError as e:
            raise RepositoryLoadError(self.location, f"{e.error_count()} invalid entries") from e

        # stored records always carry a repository-assigned id
        unassigned = [d.id for d in datas if d.id <= 0]
        if unassigned:
            raise RepositoryLoadError(self.location, f"non-positive ids {unassigned}")
        return datas

    def serialize(self, datas: list[ValidationData]) -> str:
        try:
            return _DATA_LIST_ADAPTER.dump_json(datas, by_alias=True, indent=self.indent).decode("utf-8")
        except PydanticSerializationError as e:
            raise PersistenceError(f"json str parsing error: {e}") from e

    def write(self, datas: list[ValidationData]) -> None:
        payload = self.serialize(datas)
        try:
            write_string_to_file(self.path, payload)
        except OSError as e:
            raise PersistenceError(f"file write error: {self.location}") from e
