"""Generic functions written against a capability bound

Python has no compile-time generics, so the bound a generic function is written against
is declared with a decorator. Bounded arguments reach the function as Views, whose
operators are resolved through an OperatorTable restricted to the declared bound.
The same values can therefore compare differently depending on what the code asked for:

	>>> nan = float('nan')
	>>> @generic(OrderedValue)
	... def same(x, y):
	...     return x == y
	>>> @generic(FloatingPointValue)
	... def same_float(x, y):
	...     return x == y
	>>> nan == nan, same(nan, nan), same_float(nan, nan)
	(False, True, False)

Which implementation each operator uses is settled the first time the function is called
with a given combination of argument types, and depends only on the bound and those types.
"""

import functools
import inspect
import logging

from bounds import UnsatisfiedBound
from overloads import OPERATORS, OperatorTable

__REQUIRES__ = ['bounds', 'overloads']


log = logging.getLogger('generic')


class View(object):
	"""A value as seen by generic code written against bound.
	All comparisons are resolved through table within bound.
	Plain values compared with a View are viewed under the same bound."""
	__slots__ = ('value', 'bound', 'table')

	def __init__(self, value, bound, table=None):
		self.value = value
		self.bound = bound
		self.table = table or OPERATORS

	def _invoke(self, op, other):
		if isinstance(other, View):
			other = other.value
		return self.table.invoke(op, self.value, other, within=self.bound)

	def compare(self, other):
		return self._invoke('compare', other)

	def __lt__(self, other):
		return self._invoke('lt', other)

	def __le__(self, other):
		return self._invoke('le', other)

	def __eq__(self, other):
		return self._invoke('eq', other)

	def __ne__(self, other):
		return self._invoke('ne', other)

	def __ge__(self, other):
		return self._invoke('ge', other)

	def __gt__(self, other):
		return self._invoke('gt', other)

	def __hash__(self):
		return hash(self.bound.key(self.value))

	def __repr__(self):
		return "<View {} {!r}>".format(self.bound.name, self.value)


def unwrap(value):
	"""Turn a View back into its value. Also unwraps Views directly inside a list or tuple."""
	if isinstance(value, View):
		return value.value
	if type(value) in (list, tuple):
		return type(value)(unwrap(item) for item in value)
	return value


def generic(*bounds, **param_bounds):
	"""Decorator declaring the bound a function's arguments are written against.
		@generic(OrderedValue) applies the bound to every argument
		@generic(x=OrderedValue, y=OrderedValue) applies bounds to the named arguments only
	Both forms may be combined, named bounds taking precedence.
	A *args parameter applies its bound to each of its values.
	Takes optional kwarg table, the OperatorTable to resolve operators in (default OPERATORS).
	Default values of bounded parameters are viewed and checked the same as passed values.
	Calling the function with a type that doesn't satisfy its bound raises UnsatisfiedBound.
	Both sides of a comparison must have types the bound accepts, so literals need to match:
	under FloatingPointValue write x < 0.0, as x < 0 raises NoMatchingOverload.
	Views returned by the function are unwrapped.
	"""
	table = None
	if isinstance(param_bounds.get('table'), OperatorTable):
		table = param_bounds.pop('table')
	table = table or OPERATORS
	if len(bounds) > 1:
		raise TypeError("generic() takes at most one positional bound, got {}".format(len(bounds)))
	default = bounds[0] if bounds else None

	def decorator(fn):
		signature = inspect.signature(fn)
		unknown = set(param_bounds) - set(signature.parameters)
		if unknown:
			raise TypeError("{} has no parameters {}".format(fn.__name__, ', '.join(sorted(unknown))))
		bound_of = {}
		for name in signature.parameters:
			bound = param_bounds.get(name, default)
			if bound is not None:
				bound_of[name] = bound
		# combinations of (bound, type) this function has been instantiated for
		instantiated = set()

		def instantiate(bound_types):
			key = tuple(bound_types)
			if key in instantiated:
				return
			for name, bound, tp in key:
				try:
					bound.key_for(tp)
				except UnsatisfiedBound as e:
					raise UnsatisfiedBound("{}() argument {}: {}".format(fn.__name__, name, e))
			log.debug("Instantiated {} for {}".format(fn.__name__, ', '.join(
				"{}={}: {}".format(name, tp.__name__, bound.name) for name, bound, tp in key
			)))
			instantiated.add(key)

		def view(value, bound):
			return View(unwrap(value), bound, table)

		@functools.wraps(fn)
		def wrapper(*args, **kwargs):
			bound_args = signature.bind(*args, **kwargs)
			bound_args.apply_defaults()
			bound_types = []
			for name, value in list(bound_args.arguments.items()):
				bound = bound_of.get(name)
				if bound is None:
					continue
				kind = signature.parameters[name].kind
				if kind == inspect.Parameter.VAR_POSITIONAL:
					viewed = tuple(view(item, bound) for item in value)
					bound_types.extend((name, bound, type(item.value)) for item in viewed)
				elif kind == inspect.Parameter.VAR_KEYWORD:
					viewed = {key: view(item, bound) for key, item in value.items()}
					bound_types.extend((key, bound, type(item.value)) for key, item in sorted(viewed.items()))
				else:
					viewed = view(value, bound)
					bound_types.append((name, bound, type(viewed.value)))
				bound_args.arguments[name] = viewed
			instantiate(bound_types)
			return unwrap(fn(*bound_args.args, **bound_args.kwargs))

		wrapper.bounds = dict(bound_of)
		return wrapper
	return decorator
