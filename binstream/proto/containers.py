"""Length-prefixed homogeneous containers.

Sequences and collections carry an int32 element count, arrays an int64
one. A count of -1 marks an absent container. Elements are framed by the
element codec given at construction, which is the only thing that varies
between containers of different types.
"""

from collections.abc import Callable, Iterable, Iterator, Sized
from typing import Any, Generic, TypeVar

from .framing import read_length
from .primitives import INT32, INT64
from .serialization import NULL_LENGTH, Codec, Decoder

T = TypeVar("T")


class SequenceCodec(Codec[list[T] | None], Generic[T]):
    """A list of elements behind an int32 count."""

    prefix: Codec[int] = INT32
    kind = "seq"

    def __init__(self, element: Codec[T]) -> None:
        self.element = element
        self.name = f"{self.kind}<{element.name}>"

    def encode(self, value: Iterable[T] | None) -> Iterator[bytes]:
        if value is None:
            yield from self.prefix.encode(NULL_LENGTH)
            return

        items = value if isinstance(value, Sized) else list(value)
        yield from self.prefix.encode(len(items))
        for item in items:
            yield from self.element.encode(item)

    def decode(self) -> Decoder[Any]:
        count = yield from read_length(self.prefix)
        if count == NULL_LENGTH:
            return None

        items: list[T] = []
        for _ in range(count):
            items.append((yield from self.element.decode()))
        return self._build(items)

    def _build(self, items: list[T]) -> Any:
        return items


class ArrayCodec(SequenceCodec[T]):
    """A list of elements behind an int64 count."""

    prefix = INT64
    kind = "array"


class CollectionCodec(SequenceCodec[T]):
    """Elements behind an int32 count, decoded into a caller-chosen collection type.

    Example:
        tags = CollectionCodec(STRING, factory=set)
    """

    kind = "collection"

    def __init__(self, element: Codec[T], factory: Callable[[list[T]], Any] = list) -> None:
        super().__init__(element)
        self.factory = factory

    def _build(self, items: list[T]) -> Any:
        return self.factory(items)
