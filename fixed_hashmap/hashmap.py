from typing import Any, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")

MASK_32: int = 0xffffffff

class _Absent:
	"""Result of a lookup or removal for a key that is not stored."""
	_instance: "_Absent" = None

	def __new__(cls) -> "_Absent":
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance

	def __bool__(self) -> bool:
		return False

	def __repr__(self) -> str:
		return "ABSENT"

ABSENT: _Absent = _Absent()

def next_power_of_two(n: int) -> int:
	size: int = 1
	while size < n:
		size <<= 1
	return size

def string_hash(s: str) -> int:
	h: int = 0
	for i in range(len(s)):
		h = ((h * 31) + ord(s[i])) & MASK_32
	return h

def supplemental_hash(h: int) -> int:
	"""Fold the high bits of a 32-bit hash into its low bits.

	Bucket indices are taken from the low bits only.
	"""
	h &= MASK_32
	h ^= (h >> 20) ^ (h >> 12)
	return h ^ (h >> 7) ^ (h >> 4)

class Entry(Generic[T]):
	def __init__(self, key: str, value: T, next_: "Entry[T]" = None) -> None:
		self.key: str = key
		self.value: T = value
		self.next_: Optional["Entry[T]"] = next_

	def __repr__(self) -> str:
		return "Entry({!r}, {!r})".format(self.key, self.value)

class Bucket(Generic[T]):
	"""Chain of entries sharing one slot, newest entry at the head."""

	def __init__(self) -> None:
		self.head: Optional[Entry[T]] = None

	def __len__(self) -> int:
		n: int = 0
		e: Optional[Entry[T]] = self.head
		while e != None:
			n += 1
			e = e.next_
		return n

	def empty(self) -> bool:
		return self.head is None

	def find(self, key: str) -> Optional[Entry[T]]:
		e: Optional[Entry[T]] = self.head
		while e != None:
			if e.key == key:
				return e
			e = e.next_
		return None

	def insert_or_update(self, key: str, value: T) -> bool:
		"""Return True if a new entry was linked, False if one was updated."""
		e: Optional[Entry[T]] = self.find(key)
		if e != None:
			e.value = value
			return False
		self.head = Entry(key, value, self.head)
		return True

	def unlink_head(self) -> Entry[T]:
		e: Entry[T] = self.head
		self.head = e.next_
		e.next_ = None
		return e

	def remove(self, key: str) -> Union[T, _Absent]:
		prev: Optional[Entry[T]] = None
		e: Optional[Entry[T]] = self.head
		while e != None:
			if e.key == key:
				if prev == None:
					self.head = e.next_
				else:
					prev.next_ = e.next_
				e.next_ = None
				return e.value
			prev = e
			e = e.next_
		return ABSENT

class FixedCapacityHashMap(Generic[T]):
	"""String-keyed hash map that holds at most ``capacity`` distinct keys.

	The backing list is allocated once with ``array_size`` slots, the
	smallest power of two that fits ``capacity``, and never grows. Collisions
	are chained per slot. Once the map is full, ``set`` on a new key returns
	False until a ``delete`` frees room; updates of existing keys always
	succeed.

	This class is not thread safe, see hashmap_concurrent for wrappers.
	"""

	def __init__(self, capacity: int) -> None:
		if isinstance(capacity, bool) or not isinstance(capacity, int):
			raise TypeError("capacity must be an int, got {}".format(type(capacity).__name__))
		if capacity <= 0:
			raise ValueError("capacity must be positive, got {}".format(capacity))
		self._capacity: int = capacity
		self._item_count: int = 0
		self._array_size: int = next_power_of_two(capacity)
		self._buckets: List[Optional[Bucket[T]]] = [None] * self._array_size

	@property
	def capacity(self) -> int:
		return self._capacity

	@property
	def array_size(self) -> int:
		return self._array_size

	def index(self, key: str) -> int:
		if not isinstance(key, str):
			raise TypeError("keys must be str, got {}".format(type(key).__name__))
		return supplemental_hash(string_hash(key)) & (self._array_size - 1)

	def set(self, key: str, value: T) -> bool:
		i: int = self.index(key)
		bucket: Optional[Bucket[T]] = self._buckets[i]
		new_bucket: bool = bucket is None
		if new_bucket:
			bucket = Bucket()
			self._buckets[i] = bucket

		if not bucket.insert_or_update(key, value):
			return True

		if self._item_count == self._capacity:
			bucket.unlink_head()
			if new_bucket:
				self._buckets[i] = None
			return False
		self._item_count += 1
		return True

	def get(self, key: str) -> Union[T, _Absent]:
		bucket: Optional[Bucket[T]] = self._buckets[self.index(key)]
		if bucket is None:
			return ABSENT
		e: Optional[Entry[T]] = bucket.find(key)
		if e is None:
			return ABSENT
		return e.value

	def delete(self, key: str) -> Union[T, _Absent]:
		i: int = self.index(key)
		bucket: Optional[Bucket[T]] = self._buckets[i]
		if bucket is None:
			return ABSENT
		value: Union[T, _Absent] = bucket.remove(key)
		if value is ABSENT:
			return ABSENT
		if bucket.empty():
			self._buckets[i] = None
		self._item_count -= 1
		return value

	def size(self) -> int:
		return self._item_count

	def load(self) -> float:
		return self._item_count / self._capacity

	def bucket_at(self, i: int) -> Optional[Bucket[T]]:
		return self._buckets[i]

	def chain_lengths(self) -> List[int]:
		return [ 0 if b is None else len(b) for b in self._buckets ]

	def __len__(self) -> int:
		return self._item_count

	def __contains__(self, key: Any) -> bool:
		return isinstance(key, str) and self.get(key) is not ABSENT

	def __repr__(self) -> str:
		return "FixedCapacityHashMap(capacity={}, size={})".format(self._capacity, self._item_count)
