from typing import Any, Dict, List, Sequence, Tuple, Union
import numpy
import pandas

num_t = Union[int, float]
list_num_t = Union[List[int], List[float]]

def statify(values: Sequence[num_t]) -> Tuple[num_t, num_t, float, float, float]:
	arr: numpy.ndarray = numpy.asarray(values)
	_min = arr.min().item()
	_max = arr.max().item()
	_mean = float(numpy.mean(arr))
	_mean_std = float(numpy.std(arr))
	_median = float(numpy.median(arr))
	return _min, _max, _mean, _mean_std, _median

class Stats:
	def __init__(self, values: list_num_t) -> None:
		self.values: list_num_t = values
		self.min: num_t
		self.max: num_t
		self.mean: float
		self.mean_std: float
		self.median: float
		if len(self.values) > 0:
			self.min, self.max, self.mean, self.mean_std, self.median = statify(values)
		else:
			self.min = 0
			self.max = 0
			self.mean = 0
			self.mean_std = 0
			self.median = 0

	def stats(self) -> Tuple[num_t, num_t, float, float]:
		return self.min, self.max, self.mean, self.median

	def __str__(self) -> str:
		return "min {:.3f}, max {:.3f}, mean {:.3f}, median {:.3f}".format(*self.stats())

class ChainStats:
	"""Chain length distribution of a map's slots.

	``lengths`` holds one entry per slot, 0 for unused slots. The mean over
	used slots is the expected number of key comparisons for a hit.
	"""

	def __init__(self, lengths: List[int]) -> None:
		self.lengths: numpy.ndarray = numpy.asarray(lengths, dtype = numpy.int64)
		self.slots: int = len(self.lengths)
		used: numpy.ndarray = self.lengths[self.lengths > 0]
		self.used: int = len(used)
		self.entries: int = int(self.lengths.sum())
		self.longest: int = int(self.lengths.max()) if self.slots > 0 else 0
		self.all_slots: Stats = Stats(self.lengths.tolist())
		self.used_slots: Stats = Stats(used.tolist())

	@staticmethod
	def of(hashmap: Any) -> "ChainStats":
		return ChainStats(hashmap.chain_lengths())

	def occupancy(self) -> float:
		if self.slots == 0:
			return 0.0
		return self.used / self.slots

	def histogram(self) -> Dict[int, int]:
		counts: numpy.ndarray = numpy.bincount(self.lengths)
		return { length: int(n) for length, n in enumerate(counts) if n > 0 }

	def __str__(self) -> str:
		return "{} entries in {}/{} slots ({:.1%}), longest chain {}, used slots: {}".format(
			self.entries, self.used, self.slots, self.occupancy(), self.longest, self.used_slots)

COLUMNS: List[str] = ["round", "phase", "ops", "rejected", "duration_ns", "ns_per_op", "load"]

def results_frame(results: List[Dict[str, num_t]]) -> pandas.DataFrame:
	df: pandas.DataFrame = pandas.DataFrame(results, columns = COLUMNS)
	return df

def summarize(df: pandas.DataFrame) -> pandas.DataFrame:
	return df.groupby("phase", sort = False)["ns_per_op"].agg(["min", "max", "mean", "median"])
