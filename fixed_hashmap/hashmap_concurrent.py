import threading
import contextlib
from typing import Any, Generic, Iterator, List, TypeVar, Union

from .hashmap import MASK_32, FixedCapacityHashMap, _Absent, string_hash, supplemental_hash

T = TypeVar("T")

FIBONACCI_32: int = 0x9e3779b1

class RWLock:
	def __init__(self):
		self.read_lock_: threading.Lock = threading.Lock()
		self.write_lock_: threading.Lock = threading.Lock()
		self.num_readers: int = 0

	def read_acquire(self):
		self.read_lock_.acquire()
		if self.num_readers == 0:
			self.write_lock_.acquire()
		self.num_readers += 1
		self.read_lock_.release()

	def read_release(self):
		self.read_lock_.acquire()
		self.num_readers -= 1
		if self.num_readers == 0:
			self.write_lock_.release()
		self.read_lock_.release()

	def write_acquire(self):
		self.write_lock_.acquire()

	def write_release(self):
		self.write_lock_.release()

	@contextlib.contextmanager
	def read_lock(self) -> Iterator[None]:
		self.read_acquire()
		try:
			yield
		finally:
			self.read_release()

	@contextlib.contextmanager
	def write_lock(self) -> Iterator[None]:
		self.write_acquire()
		try:
			yield
		finally:
			self.write_release()

class LockedHashMap(Generic[T]):
	"""FixedCapacityHashMap guarded by one lock for the whole map.

	Lookups share the lock, mutations hold it exclusively.
	"""

	def __init__(self, capacity: int) -> None:
		self.map: FixedCapacityHashMap[T] = FixedCapacityHashMap(capacity)
		self.lock: RWLock = RWLock()

	@property
	def capacity(self) -> int:
		return self.map.capacity

	def set(self, key: str, value: T) -> bool:
		with self.lock.write_lock():
			return self.map.set(key, value)

	def get(self, key: str) -> Union[T, _Absent]:
		with self.lock.read_lock():
			return self.map.get(key)

	def delete(self, key: str) -> Union[T, _Absent]:
		with self.lock.write_lock():
			return self.map.delete(key)

	def size(self) -> int:
		with self.lock.read_lock():
			return self.map.size()

	def load(self) -> float:
		with self.lock.read_lock():
			return self.map.load()

	def chain_lengths(self) -> List[int]:
		with self.lock.read_lock():
			return self.map.chain_lengths()

	def __len__(self) -> int:
		return self.size()

	def __contains__(self, key: Any) -> bool:
		with self.lock.read_lock():
			return key in self.map

class ShardedHashMap(Generic[T]):
	"""Splits ``capacity`` across independent LockedHashMap shards.

	Each key lives in exactly one shard, picked by Fibonacci hashing of its
	mixed hash so the choice does not follow the low bits that pick the
	slot inside the shard. A new key is
	rejected once its own shard is full, even if other shards have room.
	"""

	def __init__(self, capacity: int, shards: int) -> None:
		if isinstance(capacity, bool) or not isinstance(capacity, int):
			raise TypeError("capacity must be an int, got {}".format(type(capacity).__name__))
		if isinstance(shards, bool) or not isinstance(shards, int):
			raise TypeError("shards must be an int, got {}".format(type(shards).__name__))
		if capacity <= 0:
			raise ValueError("capacity must be positive, got {}".format(capacity))
		if shards < 1 or shards > capacity:
			raise ValueError("shards must be in [1, {}], got {}".format(capacity, shards))
		self._capacity: int = capacity
		base, extra = divmod(capacity, shards)
		self.shards: List[LockedHashMap[T]] = [None] * shards
		for i in range(shards):
			self.shards[i] = LockedHashMap(base + (1 if i < extra else 0))

	@property
	def capacity(self) -> int:
		return self._capacity

	def shard_for(self, key: str) -> LockedHashMap[T]:
		if not isinstance(key, str):
			raise TypeError("keys must be str, got {}".format(type(key).__name__))
		h: int = supplemental_hash(string_hash(key))
		h = ((h * FIBONACCI_32) & MASK_32) >> 16
		return self.shards[h % len(self.shards)]

	def set(self, key: str, value: T) -> bool:
		return self.shard_for(key).set(key, value)

	def get(self, key: str) -> Union[T, _Absent]:
		return self.shard_for(key).get(key)

	def delete(self, key: str) -> Union[T, _Absent]:
		return self.shard_for(key).delete(key)

	def size(self) -> int:
		return sum(s.size() for s in self.shards)

	def load(self) -> float:
		return self.size() / self._capacity

	def chain_lengths(self) -> List[int]:
		lengths: List[int] = []
		for s in self.shards:
			lengths.extend(s.chain_lengths())
		return lengths

	def __len__(self) -> int:
		return self.size()

	def __contains__(self, key: Any) -> bool:
		return isinstance(key, str) and key in self.shard_for(key)
