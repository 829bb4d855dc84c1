import datetime
import gc
from fractions import Fraction
from unittest import TestCase, main

from bounds import Bound, FloatingPointValue, OrderedValue, UnsatisfiedBound
from comparable import comparable
from floatorder import TotalFloat
from ordering import SAME


@comparable
class Anything(object):
	def compare(self, other):
		return SAME


class Thing(object):
	def __init__(self, size):
		self.size = size


class StandardBoundTests(TestCase):

	def test_ordered_value(self):
		for tp in (int, bool, str, bytes, float, Fraction, datetime.date, datetime.datetime,
		           datetime.timedelta, Anything, TotalFloat):
			self.assertTrue(OrderedValue.satisfied_by(tp), tp)
		for tp in (complex, object, list, Thing):
			self.assertFalse(OrderedValue.satisfied_by(tp), tp)

	def test_floating_point_value(self):
		self.assertTrue(FloatingPointValue.satisfied_by(float))
		for tp in (int, Fraction, TotalFloat, Anything):
			self.assertFalse(FloatingPointValue.satisfied_by(tp), tp)

	def test_refinement(self):
		self.assertTrue(FloatingPointValue.is_refinement_of(OrderedValue))
		self.assertTrue(FloatingPointValue.is_refinement_of(FloatingPointValue))
		self.assertFalse(OrderedValue.is_refinement_of(FloatingPointValue))

	def test_keys(self):
		self.assertIsInstance(OrderedValue.key(1.5), TotalFloat)
		self.assertEqual(OrderedValue.key(3), 3)
		self.assertEqual(OrderedValue.key('abc'), 'abc')
		self.assertEqual(FloatingPointValue.key(1.5), 1.5)
		self.assertNotIsInstance(FloatingPointValue.key(1.5), TotalFloat)

	def test_unsatisfied(self):
		self.assertRaises(UnsatisfiedBound, OrderedValue.key, 1j)
		self.assertRaises(UnsatisfiedBound, FloatingPointValue.key, 1)
		self.assertTrue(issubclass(UnsatisfiedBound, TypeError))

	def test_sort_key(self):
		values = [2.0, float('nan'), 0.0, -0.0, float('-inf')]
		result = sorted(values, key=OrderedValue.key)
		self.assertEqual([repr(value) for value in result], ['-inf', '-0.0', '0.0', '2.0', 'nan'])


class CustomBoundTests(TestCase):

	def test_register(self):
		sized = Bound('Sized')
		self.assertFalse(sized.satisfied_by(Thing))
		generation = Bound.generation
		self.assertIs(sized.register(Thing), Thing)
		self.assertGreater(Bound.generation, generation)
		self.assertTrue(sized.satisfied_by(Thing))

		class BigThing(Thing):
			pass
		self.assertTrue(sized.satisfied_by(BigThing))

	def test_refining_bound_implies_refined(self):
		parent = Bound('Parent')
		child = Bound('Child', refines=[parent])
		grandchild = Bound('Grandchild', refines=[child])
		grandchild.register(Thing)
		self.assertTrue(parent.satisfied_by(Thing))
		self.assertTrue(grandchild.is_refinement_of(parent))
		self.assertFalse(parent.is_refinement_of(child))

	def test_discarded_refinement(self):
		parent = Bound('Parent')
		child = Bound('Child', refines=[parent])
		child.register(Thing)
		self.assertTrue(parent.satisfied_by(Thing))
		del child
		gc.collect()
		self.assertEqual(len(parent._refined_by), 0)
		self.assertFalse(parent.satisfied_by(Thing))

	def test_predicate(self):
		has_size = Bound('HasSize', predicate=lambda tp: hasattr(tp, 'size'))
		class Box(object):
			size = 3
		self.assertTrue(has_size.satisfied_by(Box))
		self.assertFalse(has_size.satisfied_by(Thing))

	def test_adapt(self):
		sized = Bound('Sized')
		sized.register(Thing)
		self.assertIs(sized.key_for(Thing)(Thing(1)).__class__, Thing)
		sized.adapt(Thing, lambda thing: thing.size)
		self.assertEqual(sized.key(Thing(4)), 4)
		self.assertEqual(sorted([Thing(3), Thing(1), Thing(2)], key=sized.key)[0].size, 1)

	def test_repr(self):
		self.assertEqual(repr(OrderedValue), "<Bound OrderedValue>")


if __name__ == '__main__':
	main()
