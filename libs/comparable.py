"""Provides a three-way comparison version of functools.total_ordering

A class decorated with @comparable must supply either a compare() method
returning an Ordering, or both __lt__ and __eq__ (or all three).
Whichever is missing is filled in from the others, and the remaining operators
(__le__, __ge__, __gt__, __ne__) are always derived from __lt__ and __eq__:

	compare(x, y): SAME if x == y, else BEFORE if x < y, else AFTER
	x < y: compare(x, y) is BEFORE
	x == y: compare(x, y) is SAME
	x <= y: not y < x
	x >= y: not x < y
	x > y: not x <= y
	x != y: not x == y

The check that enough was supplied happens once, when the class is decorated,
and before any default is installed. A class that supplies all three is trusted
to keep them consistent.

	>>> @comparable
	... class Version(object):
	...     def __init__(self, *parts):
	...         self.parts = parts
	...     def compare(self, other):
	...         if self.parts == other.parts:
	...             return SAME
	...         return BEFORE if self.parts < other.parts else AFTER
	>>> Version(1, 2) < Version(1, 10)
	True
"""

import logging
from collections import namedtuple
from weakref import WeakKeyDictionary

from classtricks import find_definer
from ordering import Ordering
from pyconfig import CONF, one_of

__REQUIRES__ = ['classtricks', 'ordering', 'pyconfig']


CONF.register('derived_overrides', env_vars=['TOTALORDER_DERIVED_OVERRIDES'], default='warn',
              map_fn=one_of('warn', 'error'))

log = logging.getLogger('comparable')


THREE_WAY = 'compare'
LESS_THAN = '__lt__'
EQUALS = '__eq__'
ALWAYS_DERIVED = ('__le__', '__ge__', '__gt__', '__ne__')


class ConformanceIncomplete(TypeError):
	"""A class was declared comparable without supplying compare(), or both __lt__ and __eq__"""


# supplied: names among compare, __lt__ and __eq__ that the class provides itself
# derived: names this module installed on the class
Conformance = namedtuple('Conformance', ['cls', 'supplied', 'derived'])

# maps class to its Conformance
_conformances = WeakKeyDictionary()


def derive_compare(less_than, equals):
	"""Returns a three-way compare(x, y) function built from the given two-way functions."""
	def compare(x, y):
		if equals(x, y):
			return Ordering.SAME
		if less_than(x, y):
			return Ordering.BEFORE
		return Ordering.AFTER
	return compare


def supplied_operations(cls):
	"""Returns the set of names among compare, __lt__ and __eq__ that cls provides,
	not counting anything inherited from object or installed by this module."""
	supplied = set()
	for name in (THREE_WAY, LESS_THAN, EQUALS):
		definer = find_definer(cls, name)
		if definer is None:
			continue
		if getattr(vars(definer)[name], '_derived', False):
			continue
		supplied.add(name)
	return frozenset(supplied)


def check_conformance(cls):
	"""Returns the Conformance of cls, or raises ConformanceIncomplete.
	Depends only on the members cls declares, so the result is cached per class."""
	if cls in _conformances:
		return _conformances[cls]
	supplied = supplied_operations(cls)
	if THREE_WAY not in supplied and not {LESS_THAN, EQUALS} <= supplied:
		raise ConformanceIncomplete(
			"{} must supply compare(), or both __lt__ and __eq__ (supplies: {})".format(
				cls.__name__, ', '.join(sorted(supplied)) or 'nothing'
			)
		)
	missing = frozenset({THREE_WAY, LESS_THAN, EQUALS} - supplied)
	conf = Conformance(cls, supplied, missing | frozenset(ALWAYS_DERIVED))
	_conformances[cls] = conf
	return conf


def conformance(cls):
	"""Returns the Conformance of cls or the nearest comparable class it inherits from,
	or None if it isn't comparable."""
	for supercls in getattr(cls, '__mro__', ()):
		if supercls in _conformances:
			return _conformances[supercls]
	return None


def is_comparable(cls):
	return conformance(cls) is not None


def _invoke(name, x, y):
	"""Call x's own implementation of name directly, so python never falls back to the
	reflected operation (which would re-enter the derived operators)."""
	return getattr(type(x), name)(x, y)


def _two_way(name):
	def fn(x, y):
		result = _invoke(name, x, y)
		if result is NotImplemented:
			raise TypeError("{} not supported between {} and {}".format(
				name, type(x).__name__, type(y).__name__,
			))
		return result
	return fn

_less_than = _two_way(LESS_THAN)
_equals = _two_way(EQUALS)
_compare_from_two_way = derive_compare(_less_than, _equals)


def _derived(fn, name):
	fn.__name__ = name
	fn._derived = True
	return fn


def _make_compare(cls):
	def compare(self, other):
		"""Three-way comparison, derived from __eq__ and __lt__"""
		if not isinstance(other, cls):
			raise TypeError("Cannot compare {} with {}".format(type(self).__name__, type(other).__name__))
		return _compare_from_two_way(self, other)
	return compare

def _make_lt(cls):
	def __lt__(self, other):
		if not isinstance(other, cls):
			return NotImplemented
		return self.compare(other) is Ordering.BEFORE
	return __lt__

def _make_eq(cls):
	def __eq__(self, other):
		if not isinstance(other, cls):
			return NotImplemented
		return self.compare(other) is Ordering.SAME
	return __eq__

def _make_le(cls):
	def __le__(self, other):
		if not isinstance(other, cls):
			return NotImplemented
		result = _invoke(LESS_THAN, other, self)
		return result if result is NotImplemented else not result
	return __le__

def _make_ge(cls):
	def __ge__(self, other):
		if not isinstance(other, cls):
			return NotImplemented
		result = _invoke(LESS_THAN, self, other)
		return result if result is NotImplemented else not result
	return __ge__

def _make_gt(cls):
	def __gt__(self, other):
		if not isinstance(other, cls):
			return NotImplemented
		result = _invoke('__le__', self, other)
		return result if result is NotImplemented else not result
	return __gt__

def _make_ne(cls):
	def __ne__(self, other):
		if not isinstance(other, cls):
			return NotImplemented
		result = _invoke(EQUALS, self, other)
		return result if result is NotImplemented else not result
	return __ne__

_makers = {
	THREE_WAY: _make_compare,
	LESS_THAN: _make_lt,
	EQUALS: _make_eq,
	'__le__': _make_le,
	'__ge__': _make_ge,
	'__gt__': _make_gt,
	'__ne__': _make_ne,
}


def comparable(cls):
	"""Class decorator. Fills in compare() or __lt__/__eq__ (whichever is missing) and
	the always-derived operators, after checking the class supplies enough to derive them from.
	Raises ConformanceIncomplete if it does not.
	"""
	conf = check_conformance(cls)

	overridden = [name for name in ALWAYS_DERIVED if name in vars(cls)]
	if overridden:
		message = "{} defines {}, which are always derived from __lt__ and __eq__".format(
			cls.__name__, ', '.join(overridden),
		)
		if CONF.derived_overrides == 'error':
			raise TypeError(message)
		log.warning("{}, replacing them".format(message))

	for name in sorted(conf.derived):
		setattr(cls, name, _derived(_makers[name](cls), name))

	# python makes a class that defines __eq__ unhashable unless it also defines __hash__,
	# do the same for an __eq__ we put there.
	if EQUALS in conf.derived and find_definer(cls, '__hash__') is None:
		cls.__hash__ = None

	log.debug("{} supplies {}, derived {}".format(
		cls.__name__, sorted(conf.supplied), sorted(conf.derived),
	))
	return cls
