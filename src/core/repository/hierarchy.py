"""
Parent link resolution for validation data records.
"""

from typing import Callable, Iterable

from src.core.models import ValidationData


class HierarchyResolver:
    """
    Derives each record's parent link from its parent_id.

    The link is a view over parent_id and can be recomputed at any time:
    an unknown parent_id leaves the link unset.
    """

    def resolve(self, datas: Iterable[ValidationData]) -> dict[int, ValidationData]:
        """
        Resolve parent links across a freshly loaded collection.

        Args:
            datas: Every record of the collection

        Returns:
            The id -> record map built for the resolution
        """
        datas = list(datas)
        by_id = {d.id: d for d in datas}

        for d in datas:
            self.resolve_one(d, by_id.get)

        return by_id

    def resolve_one(self, data: ValidationData, lookup: Callable[[int], ValidationData | None]) -> None:
        """
        Resolve the parent link of a single record.

        Args:
            data: Record whose link is recomputed
            lookup: Returns the record for an id, or None
        """
        if data.parent_id is None:
            data.set_parent(None)
        else:
            data.set_parent(lookup(data.parent_id))

    def detach_children(self, parent: ValidationData, datas: Iterable[ValidationData]) -> int:
        """
        Clear the link of every record pointing at a removed parent.

        Returns:
            Number of records detached
        """
        detached = 0
        for d in datas:
            if d.parent is parent:
                d.set_parent(None)
                detached += 1
        return detached

    def attach_children(self, parent: ValidationData, datas: Iterable[ValidationData]) -> int:
        """
        Link every unlinked record whose parent_id names a newly added parent.

        Returns:
            Number of records attached
        """
        attached = 0
        for d in datas:
            if d is not parent and d.parent is None and d.parent_id == parent.id:
                d.set_parent(parent)
                attached += 1
        return attached
