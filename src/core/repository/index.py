"""
In-memory secondary indexes over validation data records.
"""

from src.core.models import ReqUrl, ValidationData


class ValidationDataIndex:
    """
    Id index and (method, url) buckets for validation data records.

    Buckets keep their records in insertion order; a removed record leaves
    the remaining order untouched. Buckets that become empty are dropped so
    get_url_list() only reports routes that still have records.

    Not thread-safe on its own: the repository guards it together with the
    record collection.
    """

    def __init__(self):
        self._by_id: dict[int, ValidationData] = {}
        self._by_url: dict[tuple[str, str], list[ValidationData]] = {}

    def add_index(self, data: ValidationData) -> None:
        """Index a record. Call exactly once per record addition."""
        self._by_id[data.id] = data
        self._by_url.setdefault((data.method, data.url), []).append(data)

    def remove_index(self, data: ValidationData) -> None:
        """Remove the record with data.id from every index. Unknown ids are ignored."""
        indexed = self._by_id.pop(data.id, None)
        if indexed is None:
            return

        key = (indexed.method, indexed.url)
        bucket = self._by_url.get(key)
        if bucket is None:
            return

        bucket[:] = [d for d in bucket if d.id != indexed.id]
        if not bucket:
            del self._by_url[key]

    def find_by_id(self, id: int | None) -> ValidationData | None:
        if id is None:
            return None
        return self._by_id.get(id)

    def find_by_method_and_url(self, method: str, url: str) -> list[ValidationData]:
        return list(self._by_url.get((method, url), ()))

    def get_url_list(self) -> list[ReqUrl]:
        return [ReqUrl(method=method, url=url) for method, url in self._by_url]

    def refresh(self) -> None:
        """Drop every index entry."""
        self._by_id.clear()
        self._by_url.clear()

    def __len__(self) -> int:
        return len(self._by_id)
