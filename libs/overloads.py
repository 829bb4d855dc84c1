"""Operator tables, and the rules for picking one implementation of an operator

An OperatorTable holds candidate implementations of the comparison operators
('compare', 'lt', 'le', 'eq', 'ne', 'ge', 'gt'). A candidate is either:
	an explicit overload, declared for concrete parameter types
	a default supplied by a Bound, declared for TypeParams constrained by that bound

When an operator is invoked, the candidates that apply to the argument types are narrowed
down by these rules, in order:
	1. Arity: only candidates taking as many arguments as were given apply.
	2. Exact match: a candidate whose parameters are exactly the argument types
	   beats any default supplied by a bound.
	3. Shape: a candidate with more concrete parameters wins, then one with fewer distinct
	   type parameters, ie. (T, T) is more specific than (T, U).
	4. Bound specificity: a candidate whose bounds refine another's wins,
	   eg. a FloatingPointValue default beats an OrderedValue default.
	5. Annotation: if a type was annotated (see annotate() and satisfies()) as satisfying
	   an operator's requirement through a particular bound, defaults from other bounds
	   are dropped.
Anything still tied raises AmbiguousOverload. Nothing applicable raises NoMatchingOverload.

Resolution can be restricted to a bound ("within"), which is what generic code does:
only defaults supplied by that bound or a bound it refines are visible, so the result
depends on the bound the code declared and the argument types, never the values.

The module-level OPERATORS table comes with the OrderedValue and FloatingPointValue defaults.
"""

import logging
import operator
from collections import namedtuple

from bounds import Bound, FloatingPointValue, OrderedValue
from classtricks import HasLogger
from comparable import derive_compare, is_comparable
from floatorder import NATIVE
from pyconfig import CONF, parse_bool

__REQUIRES__ = ['bounds', 'classtricks', 'comparable', 'floatorder', 'pyconfig']


CONF.register('resolution_cache', env_vars=['TOTALORDER_RESOLUTION_CACHE'], default=True,
              map_fn=parse_bool)


OPERATIONS = ('compare', 'lt', 'le', 'eq', 'ne', 'ge', 'gt')


class AmbiguousOverload(TypeError):
	"""More than one candidate is equally good for a call, and nothing says which to prefer"""


class NoMatchingOverload(TypeError):
	"""No candidate applies to the argument types of a call"""


class TypeParam(object):
	"""A generic type parameter. All positions using the same TypeParam must be given
	the same type (or a subclass of it), which must satisfy the bound."""

	def __init__(self, name, bound):
		self.name = name
		self.bound = bound

	def __repr__(self):
		return "{}: {}".format(self.name, self.bound.name)


class Candidate(namedtuple('Candidate', ['op', 'params', 'impl', 'provider'])):
	"""One implementation of an operator.
	params is a tuple of concrete types and/or TypeParams.
	provider is the Bound supplying this as a default, or None for an explicit overload.
	"""
	__slots__ = ()

	@property
	def type_params(self):
		seen = []
		for param in self.params:
			if isinstance(param, TypeParam) and param not in seen:
				seen.append(param)
		return seen

	@property
	def shape(self):
		"""Larger is more specific"""
		concrete = sum(1 for param in self.params if not isinstance(param, TypeParam))
		return concrete, -len(self.type_params)

	def is_exact(self, arg_types):
		return all(param is tp for param, tp in zip(self.params, arg_types))

	def applies_to(self, arg_types):
		if len(arg_types) != len(self.params):
			return False
		bindings = {}
		for param, tp in zip(self.params, arg_types):
			if not isinstance(param, TypeParam):
				if not issubclass(tp, param):
					return False
				continue
			bound_tp = bindings.get(param, tp)
			# unify to the more general of the two types
			if issubclass(tp, bound_tp):
				pass
			elif issubclass(bound_tp, tp):
				bound_tp = tp
			else:
				return False
			bindings[param] = bound_tp
		return all(param.bound.satisfied_by(tp) for param, tp in bindings.items())

	def at_least_as_specific(self, other):
		"""Position by position comparison of two candidates of the same shape"""
		for mine, theirs in zip(self.params, other.params):
			if isinstance(theirs, TypeParam):
				if isinstance(mine, TypeParam) and not mine.bound.is_refinement_of(theirs.bound):
					return False
			elif isinstance(mine, TypeParam) or not issubclass(mine, theirs):
				return False
		return True

	def __repr__(self):
		return "<{} {}({}) from {}>".format(
			type(self).__name__, self.op, ', '.join(
				repr(param) if isinstance(param, TypeParam) else param.__name__
				for param in self.params
			),
			self.provider.name if self.provider else 'explicit overload',
		)


class OperatorTable(HasLogger):

	def __init__(self, name='operators', defaults=True, **kwargs):
		"""If defaults is True, the table starts with the OrderedValue and FloatingPointValue defaults."""
		self.name = name
		kwargs.setdefault('logger', logging.getLogger('overloads'))
		super(OperatorTable, self).__init__(**kwargs)
		self._candidates = {op: [] for op in OPERATIONS}
		self._annotations = {}
		self._cache = {}
		self._generation = None
		# bumped on every change to this table's candidates or annotations
		self._version = 0
		if defaults:
			declare_defaults(self)

	def _get_logger_name(self):
		return self.name

	def _invalidate(self):
		self._version += 1
		self._cache.clear()

	def declare(self, op, params, impl, provider=None):
		"""Add a candidate implementation of op. Returns the Candidate.
		Raises AmbiguousOverload if an explicit overload with exactly the same parameters
		already exists."""
		if op not in self._candidates:
			raise ValueError("Unknown operation {!r}".format(op))
		candidate = Candidate(op, tuple(params), impl, provider)
		if provider is None:
			for existing in self._candidates[op]:
				if existing.provider is None and existing.params == candidate.params:
					raise AmbiguousOverload("{} is already declared as {}".format(candidate, existing))
		self._candidates[op].append(candidate)
		self._invalidate()
		self.logger.debug("Declared {}".format(candidate))
		return candidate

	def overload(self, op, *types):
		"""Decorator form of declare() for explicit overloads:
			@table.overload('eq', Money, Money)
			def money_eq(a, b):
				...
		"""
		def decorator(fn):
			self.declare(op, types, fn)
			return fn
		return decorator

	def annotate(self, tp, op, bound):
		"""Declare that tp's implementation of op satisfies bound's requirement for it.
		When that leaves defaults from more than one bound tied, only bound's is considered."""
		if op not in self._candidates:
			raise ValueError("Unknown operation {!r}".format(op))
		self._annotations[tp, op] = bound
		self._invalidate()

	def candidates(self, op, within=None):
		"""The candidates for op visible from code restricted to the given bound (None for all)"""
		if within is None:
			return list(self._candidates[op])
		return [
			candidate for candidate in self._candidates[op]
			if candidate.provider is not None and within.is_refinement_of(candidate.provider)
		]

	def resolve(self, op, arg_types, within=None):
		"""Returns the Candidate to use for op with arguments of the given types."""
		arg_types = tuple(arg_types)
		if self._generation != Bound.generation:
			self._invalidate()
			self._generation = Bound.generation
		key = op, arg_types, within
		if key in self._cache:
			return self._cache[key]
		version = self._version
		candidate = self._select(op, arg_types, within)
		# don't cache a selection the table or a bound changed under
		if CONF.resolution_cache and version == self._version and self._generation == Bound.generation:
			self._cache[key] = candidate
		return candidate

	def _select(self, op, arg_types, within):
		names = ', '.join(tp.__name__ for tp in arg_types)
		where = " within {}".format(within.name) if within else ""

		if within is not None:
			unsatisfied = [tp.__name__ for tp in arg_types if not within.satisfied_by(tp)]
			if unsatisfied:
				raise NoMatchingOverload("No implementation of {}({}){}: {} not {}".format(
					op, names, where, ', '.join(unsatisfied), within.name,
				))

		pool = [c for c in self.candidates(op, within) if c.applies_to(arg_types)]
		if not pool:
			raise NoMatchingOverload("No implementation of {}({}){}".format(op, names, where))

		exact = [c for c in pool if c.is_exact(arg_types)]
		if exact:
			pool = exact
		else:
			best_shape = max(c.shape for c in pool)
			pool = [c for c in pool if c.shape == best_shape]
			pool = [
				c for c in pool
				if not any(
					other.at_least_as_specific(c) and not c.at_least_as_specific(other)
					for other in pool
				)
			]

		if len(pool) > 1:
			pool = self._apply_annotations(op, arg_types, pool)

		if len(pool) > 1:
			raise AmbiguousOverload("{}({}){} is ambiguous between: {}".format(
				op, names, where, ', '.join(map(repr, pool)),
			))
		candidate, = pool
		self.logger.debug("Resolved {}({}){} to {}".format(op, names, where, candidate))
		return candidate

	def _apply_annotations(self, op, arg_types, pool):
		for tp in arg_types:
			for supercls in tp.__mro__:
				bound = self._annotations.get((supercls, op))
				if bound is None:
					continue
				chosen = [c for c in pool if c.provider is bound]
				if chosen:
					return chosen
		return pool

	def invoke(self, op, *args, **kwargs):
		"""Call the implementation of op chosen for the types of args.
		Takes optional kwarg within, the bound the calling code is restricted to."""
		within = kwargs.pop('within', None)
		if kwargs:
			raise TypeError("Unexpected keyword args: {}".format(kwargs))
		candidate = self.resolve(op, [type(arg) for arg in args], within=within)
		return candidate.impl(*args)

	def verify(self, *types):
		"""Resolve every operation for each of the given types compared with itself, so that
		any ambiguity is raised now rather than on first use."""
		for tp in types:
			for op in OPERATIONS:
				if self.candidates(op):
					self.resolve(op, (tp, tp))


def satisfies(bound, *ops, **kwargs):
	"""Class decorator form of OperatorTable.annotate(). Takes optional kwarg table,
	default OPERATORS.
		@satisfies(OrderedValue, 'eq')
		class Foo(object):
			...
	"""
	table = kwargs.pop('table', None)
	if kwargs:
		raise TypeError("Unexpected keyword args: {}".format(kwargs))
	def decorator(cls):
		for op in ops:
			(table or OPERATORS).annotate(cls, op, bound)
		return cls
	return decorator


_native_compare = derive_compare(operator.lt, operator.eq)


def ordered_compare(x, y):
	"""compare() under OrderedValue: the view's own compare() if it has one,
	else derived from its < and ==."""
	x, y = OrderedValue.key(x), OrderedValue.key(y)
	if is_comparable(type(x)):
		return x.compare(y)
	return _native_compare(x, y)


def _via_ordered_key(op):
	def impl(x, y):
		return op(OrderedValue.key(x), OrderedValue.key(y))
	impl.__name__ = 'ordered_{}'.format(op.__name__)
	return impl


def declare_defaults(table):
	"""Declare the OrderedValue and FloatingPointValue defaults for every operation"""
	T = TypeParam('T', OrderedValue)
	table.declare('compare', (T, T), ordered_compare, provider=OrderedValue)
	for op in OPERATIONS[1:]:
		table.declare(op, (T, T), _via_ordered_key(getattr(operator, op)), provider=OrderedValue)

	F = TypeParam('F', FloatingPointValue)
	for op in OPERATIONS:
		table.declare(op, (F, F), getattr(NATIVE, op), provider=FloatingPointValue)


OPERATORS = OperatorTable('default')


def invoke(op, *args, **kwargs):
	"""Invoke op from the default table, see OperatorTable.invoke()"""
	return OPERATORS.invoke(op, *args, **kwargs)
