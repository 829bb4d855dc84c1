"""Native and derived orderings of floats

Python's own float comparisons are the IEEE 754 "level 1" partial order:
NaN is unordered with everything (itself included), and -0.0 == 0.0.
That is what code which knows it is dealing with floats wants, but it makes floats unsafe
for generic code that needs a real total order (sorting, dict keys, binary search...).

The derived order is built from the native comparisons, with tie-breaks for the cases
the native order can't answer:
	-0.0 comes before 0.0
	NaN is equal to NaN
	NaN comes after everything else, including inf

NATIVE and DERIVED collect the seven comparison functions of each order,
and TotalFloat wraps a float so that python's operators use the derived order:

	>>> nan = float('nan')
	>>> nan == nan
	False
	>>> TotalFloat(nan) == TotalFloat(nan)
	True
	>>> sorted([1.0, nan, -0.0, 0.0, float('-inf')], key=TotalFloat)
	[-inf, -0.0, 0.0, 1.0, nan]

Run as a script to print both orders side by side for some interesting pairs.
"""

import logging
import math
import operator
from collections import namedtuple

from comparable import comparable
from ordering import Ordering
from pyconfig import CONF

__REQUIRES__ = ['comparable', 'ordering', 'pyconfig']


CONF.register('log_level', env_vars=['TOTALORDER_LOG_LEVEL'], default='WARNING', map_fn=str.upper)


Semantics = namedtuple('Semantics', ['name', 'compare', 'lt', 'le', 'eq', 'ne', 'ge', 'gt'])


def derived_compare(x, y):
	"""Three-way comparison of two floats under the derived total order"""
	if x < y:
		return Ordering.BEFORE
	if y < x:
		return Ordering.AFTER
	# neither is less than the other: they're equal, signed zeros, or at least one is NaN
	if x == 0 and y == 0:
		x_negative = math.copysign(1, x) < 0
		y_negative = math.copysign(1, y) < 0
		if x_negative == y_negative:
			return Ordering.SAME
		return Ordering.BEFORE if x_negative else Ordering.AFTER
	if math.isnan(x):
		return Ordering.SAME if math.isnan(y) else Ordering.AFTER
	if math.isnan(y):
		return Ordering.BEFORE
	return Ordering.SAME


@comparable
class TotalFloat(object):
	"""A float, ordered by the derived total order.
	Only compare() is defined here, the operators are derived from it.
	Hashes consistently with derived equality, so it can be used as a dict key.
	"""
	__slots__ = ('value',)

	def __init__(self, value):
		self.value = float(value)

	def compare(self, other):
		if not isinstance(other, TotalFloat):
			raise TypeError("Cannot compare TotalFloat with {}".format(type(other).__name__))
		return derived_compare(self.value, other.value)

	def __hash__(self):
		if math.isnan(self.value):
			return hash('nan')
		# -0.0 and 0.0 are different values here
		return hash((self.value, math.copysign(1, self.value)))

	def __float__(self):
		return self.value

	def __repr__(self):
		return "<{} {!r}>".format(type(self).__name__, self.value)


def _via_total(op):
	return lambda x, y: op(TotalFloat(x), TotalFloat(y))


NATIVE = Semantics('native',
	# the native order has no total three-way answer, so an explicit compare() is always derived
	compare = derived_compare,
	lt = operator.lt,
	le = operator.le,
	eq = operator.eq,
	ne = operator.ne,
	ge = operator.ge,
	gt = operator.gt,
)

DERIVED = Semantics('derived',
	compare = derived_compare,
	lt = _via_total(operator.lt),
	le = _via_total(operator.le),
	eq = _via_total(operator.eq),
	ne = _via_total(operator.ne),
	ge = _via_total(operator.ge),
	gt = _via_total(operator.gt),
)


OPERATOR_SYMBOLS = [
	('lt', '<'),
	('le', '<='),
	('eq', '=='),
	('ne', '!='),
	('ge', '>='),
	('gt', '>'),
]


def print_results(x, y):
	print("{!r} vs {!r}".format(x, y))
	for attr, symbol in OPERATOR_SYMBOLS:
		print("\t{:<2}  native {!s:<5}  derived {!s:<5}".format(
			symbol, getattr(NATIVE, attr)(x, y), getattr(DERIVED, attr)(x, y),
		))
	print("\tcompare  {}".format(derived_compare(x, y)))


def main():
	logging.basicConfig(level=CONF.log_level)
	logging.getLogger('floatorder').debug("Config:\n{}".format(CONF.format()))
	nan = float('nan')
	inf = float('inf')
	for x, y in [(nan, nan), (nan, inf), (1.0, nan), (-0.0, 0.0), (0.0, 0.0), (1.0, 2.0)]:
		print_results(x, y)


if __name__ == '__main__':
	main()
