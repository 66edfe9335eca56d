from .hashmap import ABSENT, Bucket, Entry, FixedCapacityHashMap, next_power_of_two, string_hash, supplemental_hash
from .hashmap_concurrent import LockedHashMap, RWLock, ShardedHashMap
