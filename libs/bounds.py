"""Capability bounds that generic code is written against

A Bound names a requirement that generic code places on the types it works with.
Which bound a piece of code declares, not the values that flow through it,
decides how those values get compared (see generic and overloads).

Two bounds are provided:
	OrderedValue: anything with a total order. This includes @comparable classes,
	              the natively totally ordered builtins, and floats - which are viewed
	              through floatorder.TotalFloat so they really are totally ordered.
	FloatingPointValue: floats, compared with their native IEEE semantics.
	                    Refines OrderedValue, so every floating point type is also an ordered value.

A bound's key() function gives the view of a value that has the bound's ordering,
which makes it usable directly as a sort or dict key:
	>>> sorted([2.0, float('nan'), -0.0, 0.0], key=OrderedValue.key)
	[-0.0, 0.0, 2.0, nan]
"""

import datetime
import fractions
from weakref import WeakSet

from classtricks import issubclass
from comparable import is_comparable
from floatorder import TotalFloat

__REQUIRES__ = ['classtricks', 'comparable', 'floatorder']


class UnsatisfiedBound(TypeError):
	"""A type was used where a bound was required, but does not satisfy it"""


class Bound(object):
	"""A named capability requirement.
	A type satisfies the bound if it (or a base class) was registered with register(),
	if the predicate accepts it, or if it satisfies any bound that refines this one.
	"""

	# Bumped whenever any bound's registrations change, so that caches of
	# resolutions involving bounds know to throw themselves away.
	generation = 0

	def __init__(self, name, refines=(), predicate=None):
		self.name = name
		self.refines = tuple(refines)
		self.predicate = predicate
		self._registered = WeakSet()
		self._adapters = {}
		self._refined_by = WeakSet()
		self._key_cache = {}
		for bound in self.refines:
			bound._refined_by.add(self)

	def __repr__(self):
		return "<Bound {}>".format(self.name)

	@classmethod
	def _changed(cls):
		Bound.generation += 1

	def register(self, tp):
		"""Declare that tp and its subclasses satisfy this bound. Returns tp, so it can be used
		as a class decorator."""
		self._registered.add(tp)
		self._key_cache.clear()
		self._changed()
		return tp

	def adapt(self, tp, view):
		"""Values of tp (or subclasses) are to be ordered as view(value) under this bound"""
		self._adapters[tp] = view
		self._key_cache.clear()
		self._changed()

	def is_refinement_of(self, other):
		"""True if satisfying this bound implies satisfying other (including other is self)"""
		return self is other or any(bound.is_refinement_of(other) for bound in self.refines)

	def satisfied_by(self, tp):
		if any(issubclass(tp, registered) for registered in self._registered):
			return True
		if self.predicate is not None and self.predicate(tp):
			return True
		return any(bound.satisfied_by(tp) for bound in self._refined_by)

	def key_for(self, tp):
		"""Returns the function mapping values of tp to their view under this bound.
		Raises UnsatisfiedBound if tp doesn't satisfy the bound."""
		if tp in self._key_cache:
			return self._key_cache[tp]
		if not self.satisfied_by(tp):
			raise UnsatisfiedBound("{} does not satisfy {}".format(tp.__name__, self.name))
		key = _identity
		for supercls in tp.__mro__:
			if supercls in self._adapters:
				key = self._adapters[supercls]
				break
		self._key_cache[tp] = key
		return key

	def key(self, value):
		"""The view of value under this bound. Suitable as a key= argument for sorting."""
		return self.key_for(type(value))(value)


def _identity(value):
	return value


OrderedValue = Bound('OrderedValue', predicate=is_comparable)
for _tp in (int, str, bytes, fractions.Fraction, datetime.date, datetime.time, datetime.timedelta):
	OrderedValue.register(_tp)
OrderedValue.adapt(float, TotalFloat)

FloatingPointValue = Bound('FloatingPointValue', refines=[OrderedValue])
FloatingPointValue.register(float)
