"""
Chainable in-memory collection used by the report collections.

Decoded reports are small lists held in memory; this wrapper gives them a
fluent filtering API without pulling in a query engine.
"""

from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, TypeVar, Union

T = TypeVar('T')


class QueryableCollection(Generic[T]):
    """
    A chainable collection for filtering and ordering decoded reports.

    Every filtering method returns a new collection of the same class, so
    specialised collections keep their extra methods through a chain.

    Examples:
        # Attribute matching
        metars.where(station_id='KFME').first()

        # Chaining
        sigmets.filter(lambda s: s.hazard is not None).take(5).all()

        # Sorting
        tafs.order_by(lambda t: t.valid_time_to, reverse=True).first()
    """

    def __init__(self, items: Union[List[T], Iterable[T]] = ()):
        self._items: List[T] = items if isinstance(items, list) else list(items)

    def _new(self, items: List[T]) -> 'QueryableCollection[T]':
        return self.__class__(items)

    def filter(self, predicate: Callable[[T], bool]) -> 'QueryableCollection[T]':
        """
        Keep the items for which ``predicate`` returns True.

        Examples:
            metars.filter(lambda m: m.visibility is not None and m.visibility < 3)
        """
        return self._new([item for item in self._items if predicate(item)])

    def where(self, **kwargs) -> 'QueryableCollection[T]':
        """
        Keep the items whose attributes equal all of the given values.

        Examples:
            tafs.where(station_id='PHTO')
        """
        def matches(item: T) -> bool:
            return all(getattr(item, key, None) == value for key, value in kwargs.items())
        return self.filter(matches)

    def first(self) -> Optional[T]:
        """First item, or None when empty."""
        return self._items[0] if self._items else None

    def last(self) -> Optional[T]:
        """Last item, or None when empty."""
        return self._items[-1] if self._items else None

    def all(self) -> List[T]:
        """All items as a list."""
        return self._items

    def count(self) -> int:
        return len(self._items)

    def exists(self) -> bool:
        return bool(self._items)

    def group_by(self, key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        """
        Group items by a key, keeping document order within each group.

        Examples:
            by_station = metars.group_by(lambda m: m.station_id)
        """
        result: Dict[Any, List[T]] = {}
        for item in self._items:
            result.setdefault(key_func(item), []).append(item)
        return result

    def order_by(self, key_func: Callable[[T], Any], reverse: bool = False) -> 'QueryableCollection[T]':
        """Sort items by a key; the sort is stable."""
        return self._new(sorted(self._items, key=key_func, reverse=reverse))

    def take(self, n: int) -> 'QueryableCollection[T]':
        """First ``n`` items."""
        return self._new(self._items[:n])

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._new(self._items[index])
        return self._items[index]

    def __bool__(self):
        return bool(self._items)

    def __repr__(self):
        count = len(self._items)
        if count == 0:
            return f"{self.__class__.__name__}([])"
        preview = [repr(item) for item in self._items[:3]]
        if count > 3:
            preview.append('...')
        return f"{self.__class__.__name__}([{', '.join(preview)}], count={count})"

    # Set operations compare items by identity.

    def __or__(self, other: 'QueryableCollection[T]') -> 'QueryableCollection[T]':
        """Union (|), keeping the order of ``self`` then ``other``."""
        seen = set()
        result = []
        for item in self._items + other._items:
            if id(item) not in seen:
                seen.add(id(item))
                result.append(item)
        return self._new(result)

    def __and__(self, other: 'QueryableCollection[T]') -> 'QueryableCollection[T]':
        """Intersection (&)."""
        other_ids = {id(item) for item in other._items}
        return self._new([item for item in self._items if id(item) in other_ids])

    def __sub__(self, other: 'QueryableCollection[T]') -> 'QueryableCollection[T]':
        """Difference (-)."""
        other_ids = {id(item) for item in other._items}
        return self._new([item for item in self._items if id(item) not in other_ids])
