#!/usr/bin/env python3
import argparse
import os
import sys
import time
from typing import Dict, List, Optional, Union

import pandas

from .hashmap import ABSENT, FixedCapacityHashMap
from .hashmap_concurrent import ShardedHashMap
from .stats import ChainStats, results_frame, summarize

DEFAULT_CAPACITY: int = 100000

map_t = Union[FixedCapacityHashMap, ShardedHashMap]

class BenchConfig:
	def __init__(self, capacity: int = None, keys: int = None, shards: int = 0,
			rounds: int = 1, details: bool = False) -> None:
		if capacity == None:
			capacity = int(os.environ.get("FIXED_HASHMAP_CAPACITY", DEFAULT_CAPACITY))
		self.capacity: int = capacity
		self.keys: int = capacity if keys == None else keys
		self.shards: int = shards
		self.rounds: int = rounds
		self.details: bool = details
		if self.capacity <= 0:
			raise ValueError("capacity must be positive, got {}".format(self.capacity))
		if self.keys < 0:
			raise ValueError("keys must not be negative, got {}".format(self.keys))
		if self.rounds < 1:
			raise ValueError("rounds must be at least 1, got {}".format(self.rounds))
		if self.shards < 0:
			raise ValueError("shards must not be negative, got {}".format(self.shards))
		if self.shards > self.capacity:
			raise ValueError("shards must not exceed capacity {}, got {}".format(self.capacity, self.shards))

	@staticmethod
	def from_args(args: argparse.Namespace) -> "BenchConfig":
		return BenchConfig(args.capacity, args.keys, args.shards, args.rounds, args.details)

	def create_map(self) -> map_t:
		if self.shards > 0:
			return ShardedHashMap(self.capacity, self.shards)
		return FixedCapacityHashMap(self.capacity)

class Bench:
	def __init__(self, conf: BenchConfig) -> None:
		self.conf: BenchConfig = conf
		self.results: List[Dict[str, Union[int, float]]] = []
		self.mismatches: int = 0

	def record(self, round_: int, phase: str, ops: int, rejected: int,
			start: int, end: int, hashmap: map_t) -> None:
		duration: int = end - start
		print("[time] (ns) {} start: {}, end: {}, duration: {}".format(phase, start, end, duration))
		self.results.append({
			"round": round_,
			"phase": phase,
			"ops": ops,
			"rejected": rejected,
			"duration_ns": duration,
			"ns_per_op": duration / ops if ops > 0 else 0.0,
			"load": hashmap.load(),
		})

	def run_round(self, round_: int) -> None:
		hashmap: map_t = self.conf.create_map()
		keys: List[str] = [ "key" + str(i) for i in range(self.conf.keys) ]

		rejected: int = 0
		start: int = time.perf_counter_ns()
		for i, k in enumerate(keys):
			if not hashmap.set(k, "value" + str(i)):
				rejected += 1
		end: int = time.perf_counter_ns()
		self.record(round_, "set", len(keys), rejected, start, end, hashmap)
		if rejected:
			print("[info] round {}: {} of {} inserts rejected at capacity {}".format(
				round_, rejected, len(keys), self.conf.capacity))

		if self.conf.details:
			print("[info] round {}: {}".format(round_, ChainStats.of(hashmap)))

		missing: int = 0
		start = time.perf_counter_ns()
		for i, k in enumerate(keys):
			v = hashmap.get(k)
			if v is ABSENT:
				missing += 1
			elif v != "value" + str(i):
				print("[error] round {}: key {} read back {!r}".format(round_, k, v), file = sys.stderr)
				self.mismatches += 1
		end = time.perf_counter_ns()
		self.record(round_, "get", len(keys), missing, start, end, hashmap)
		if missing != rejected:
			print("[error] round {}: {} keys missing, expected {}".format(round_, missing, rejected),
				file = sys.stderr)
			self.mismatches += 1

		start = time.perf_counter_ns()
		for k in keys:
			hashmap.delete(k)
		end = time.perf_counter_ns()
		self.record(round_, "delete", len(keys), 0, start, end, hashmap)
		if hashmap.size() != 0:
			print("[error] round {}: {} keys left after delete".format(round_, hashmap.size()),
				file = sys.stderr)
			self.mismatches += 1

	def run(self) -> pandas.DataFrame:
		print("[info] capacity {}, keys {}, shards {}, rounds {}".format(self.conf.capacity,
			self.conf.keys, self.conf.shards, self.conf.rounds))
		for r in range(self.conf.rounds):
			self.run_round(r)
		return results_frame(self.results)

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
	parser: argparse.ArgumentParser = argparse.ArgumentParser(
		description = "benchmark set/get/delete on a fixed capacity hash map")
	parser.add_argument("-c", "--capacity", dest = "capacity", type = int, default = None,
		help = "map capacity (default $FIXED_HASHMAP_CAPACITY or {})".format(DEFAULT_CAPACITY))
	parser.add_argument("-n", "--keys", dest = "keys", type = int, default = None,
		help = "number of distinct keys to insert (default capacity)")
	parser.add_argument("-s", "--shards", dest = "shards", type = int, default = 0,
		help = "split the map into this many locked shards (0 for a single map)")
	parser.add_argument("-r", "--rounds", dest = "rounds", type = int, default = 1,
		help = "number of rounds")
	parser.add_argument("-l", dest = "details", action = "store_true", help = "log extra details")
	return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
	args: argparse.Namespace = parse_args(argv)
	try:
		conf: BenchConfig = BenchConfig.from_args(args)
	except ValueError as ex:
		print("[error] {}".format(ex), file = sys.stderr)
		return 2

	bench: Bench = Bench(conf)
	df: pandas.DataFrame = bench.run()

	if conf.details:
		print(df.to_string(index = False))
	print(summarize(df).to_string())
	if bench.mismatches != 0:
		print("[error] {} mismatches".format(bench.mismatches), file = sys.stderr)
		return 1
	print("[info] finished")
	return 0

if __name__ == "__main__":
	sys.exit(main())
