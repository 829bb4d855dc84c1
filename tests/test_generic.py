import math
from unittest import TestCase, main

from bounds import FloatingPointValue, OrderedValue, UnsatisfiedBound
from comparable import comparable
from generic import View, generic, unwrap
from ordering import AFTER, BEFORE, SAME
from overloads import NoMatchingOverload, OperatorTable


nan = float('nan')


@comparable
class Version(object):
	def __init__(self, *parts):
		self.parts = parts
	def __lt__(self, other):
		return self.parts < other.parts
	def __eq__(self, other):
		return self.parts == other.parts
	def __hash__(self):
		return hash(self.parts)


@generic(OrderedValue)
def same(x, y):
	return x == y

@generic(FloatingPointValue)
def same_float(x, y):
	return x == y

@generic(OrderedValue)
def ordered_operators(x, y):
	return x < y, x <= y, x == y, x != y, x >= y, x > y

@generic(FloatingPointValue)
def float_operators(x, y):
	return x < y, x <= y, x == y, x != y, x >= y, x > y

@generic(OrderedValue)
def three_way(x, y):
	return x.compare(y)

@generic(FloatingPointValue)
def float_three_way(x, y):
	return x.compare(y)

@generic(OrderedValue)
def largest(*values):
	best = values[0]
	for value in values[1:]:
		if value > best:
			best = value
	return best

@generic(OrderedValue)
def is_negative(x):
	return x < 0.0

@generic(FloatingPointValue)
def is_negative_float(x):
	return x < 0.0

@generic(OrderedValue)
def distinct(*values):
	return len(set(values))

@generic(x=OrderedValue)
def clamp_low(x, limit):
	return limit if x < limit else x


class DivergenceTests(TestCase):

	def test_nan_equality(self):
		self.assertFalse(nan == nan)
		self.assertTrue(same(nan, nan))
		self.assertFalse(same_float(nan, nan))

	def test_signed_zero(self):
		self.assertTrue(-0.0 == 0.0)
		self.assertFalse(same(-0.0, 0.0))
		self.assertTrue(same_float(-0.0, 0.0))

	def test_all_operators(self):
		self.assertEqual(float_operators(nan, 1.0), (False, False, False, True, False, False))
		self.assertEqual(ordered_operators(nan, 1.0), (False, False, False, True, True, True))
		self.assertEqual(float_operators(-0.0, 0.0), (False, True, True, False, True, False))
		self.assertEqual(ordered_operators(-0.0, 0.0), (True, True, False, True, False, False))

	def test_three_way(self):
		self.assertIs(three_way(nan, float('inf')), AFTER)
		self.assertIs(three_way(-0.0, 0.0), BEFORE)
		# floating point code only gets a three-way answer by asking for it, and it is the total one
		self.assertIs(float_three_way(nan, nan), SAME)

	def test_literals(self):
		self.assertTrue(is_negative(-0.0))
		self.assertFalse(is_negative_float(-0.0))
		self.assertFalse(is_negative(nan))


class GenericTests(TestCase):

	def test_other_ordered_types(self):
		self.assertTrue(same(5, 5))
		self.assertTrue(same('a', 'a'))
		self.assertIs(three_way(3, 5), BEFORE)
		self.assertIs(three_way(5, 5), SAME)
		self.assertIs(three_way(5, 3), AFTER)
		self.assertTrue(same(Version(1, 2), Version(1, 2)))
		self.assertIs(three_way(Version(1, 2), Version(1, 10)), BEFORE)

	def test_varargs(self):
		self.assertTrue(math.isnan(largest(1.0, nan, 3.0)))
		self.assertEqual(largest(3, 7, 5), 7)
		self.assertEqual(largest(Version(1), Version(3), Version(2)).parts, (3,))

	def test_returns_unwrapped(self):
		result = largest(1.0, 2.0)
		self.assertIs(type(result), float)

	def test_hashing(self):
		self.assertEqual(distinct(nan, float('nan'), 0.0, -0.0, 0.0), 3)
		self.assertEqual(distinct(1, 2, 2), 2)

	def test_unbound_parameters(self):
		self.assertEqual(clamp_low(-0.0, 0.0), 0.0)
		self.assertEqual(clamp_low(5, 3), 5)
		self.assertEqual(clamp_low.bounds, {'x': OrderedValue})

	def test_unsatisfied(self):
		self.assertRaises(UnsatisfiedBound, same_float, 1, 2)
		self.assertRaises(UnsatisfiedBound, same, 1j, 1j)
		self.assertRaises(UnsatisfiedBound, largest, 1, 2j)

	def test_default_arguments(self):
		@generic(OrderedValue)
		def self_equal(x, y=nan):
			return y == y
		self.assertTrue(self_equal(1.0, nan))
		self.assertTrue(self_equal(1.0))

		@generic(OrderedValue)
		def with_complex(x, y=1j):
			return x == x
		self.assertRaises(UnsatisfiedBound, with_complex, 1.0)
		self.assertTrue(with_complex(1.0, 2.0))

		@generic(OrderedValue)
		def count(*values, **named):
			return len(values), len(named)
		self.assertEqual(count(), (0, 0))

	def test_literals_must_match_bound(self):
		@generic(FloatingPointValue)
		def below_zero(x):
			return x < 0
		self.assertRaises(NoMatchingOverload, below_zero, -1.0)
		self.assertTrue(is_negative_float(-1.0))

	def test_mismatched_types(self):
		self.assertRaises(NoMatchingOverload, same, 1, 1.0)

	def test_nested_calls(self):
		@generic(OrderedValue)
		def outer(x, y):
			return same_float(x, y), same(x, y)
		self.assertEqual(outer(nan, nan), (False, True))

	def test_bad_declarations(self):
		self.assertRaises(TypeError, generic(z=OrderedValue), lambda x: x)
		self.assertRaises(TypeError, generic, OrderedValue, FloatingPointValue)

	def test_custom_table(self):
		empty = OperatorTable('empty', defaults=False)
		@generic(OrderedValue, table=empty)
		def lonely(x, y):
			return x == y
		self.assertRaises(NoMatchingOverload, lonely, 1, 1)

	def test_instantiation_is_logged_once(self):
		@generic(OrderedValue)
		def fresh(x, y):
			return x < y
		with self.assertLogs('generic', level='DEBUG') as logs:
			fresh(1.0, 2.0)
			fresh(3.0, 4.0)
			fresh(1, 2)
		self.assertEqual(len(logs.output), 2)
		self.assertIn('x=float: OrderedValue', logs.output[0])


class ViewTests(TestCase):

	def test_repr(self):
		self.assertEqual(repr(View(1.5, OrderedValue)), "<View OrderedValue 1.5>")

	def test_compare_with_view(self):
		a, b = View(nan, OrderedValue), View(nan, OrderedValue)
		self.assertTrue(a == b)
		self.assertEqual(hash(a), hash(b))
		self.assertIs(a.compare(1.0), AFTER)

	def test_unwrap(self):
		view = View(2, OrderedValue)
		self.assertEqual(unwrap(view), 2)
		self.assertEqual(unwrap([view, 3]), [2, 3])
		self.assertEqual(unwrap((view,)), (2,))
		self.assertEqual(unwrap('x'), 'x')


if __name__ == '__main__':
	main()
