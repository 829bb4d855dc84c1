"""The result of a three-way comparison

For a comparison of x against y:
	BEFORE means x precedes y
	SAME means x and y are order-equivalent
	AFTER means x follows y

Values are singletons, so they may be compared with either == or is:
	>>> result = x.compare(y)
	>>> if result is BEFORE:
	...     ...
"""

from myenum import Enum

__REQUIRES__ = ['myenum']


class Ordering(Enum):
	__slots__ = ()
	_values = "BEFORE", "SAME", "AFTER"


BEFORE = Ordering.BEFORE
SAME = Ordering.SAME
AFTER = Ordering.AFTER
