"""Yet another enum implementation

This one aims to provide a simple, sane API with valuable properties.
It does NOT support treating enum values as integers.

* Enum types are subclasses of Enum
* Enum values are instances of their enum type, and are immutable
* Enum type exposes all instantiated values via attribute lookup, and iterates over them
  in the order they were defined
* str(value) gives value name, but repr on both value and class give helpfully formatted results
* An enum type that lists its values in its class body is closed: no further values may be added

These are all equivilent:
	MyThing = enum("MyThing", "FOO", "BAR", "BAZ")
or:
	class MyThing(Enum):
		_values = "FOO", "BAR", "BAZ"

The following are also equivilent to the above, except that MyThing stays open for more values:
	class MyThing(Enum):
		pass
	MyThing.define("FOO", "BAR", "BAZ")
or:
	class MyThing(Enum):
		pass
	MyThing("FOO")
	MyThing("BAR")
	MyThing("BAZ")

You may subclass subclasses of Enum, but values are not inherited.
It is reccomended that you only subclass subclasses without values to avoid confusion.
"""


def enum(name, *values):
	"""Helper method ala namedtuple(). The resulting type is closed."""
	return _EnumMeta(name, (Enum,), {'_values': values})


class _EnumMeta(type):
	"""Metaclass for Enum type. Provides various bits of functionality for the class."""

	def __init__(self, name, bases, attrs):
		super(_EnumMeta, self).__init__(name, bases, attrs)
		self.values = []
		self._closed = False
		values = attrs.get('_values', ())
		self.define(*values)
		self._closed = bool(values)

	@property
	def names(self):
		return {value.name: value for value in self.values}

	def __getattr__(self, name):
		assert name not in ('names', 'values'), "_EnumMeta instance missing required attributes"
		if name in self.names:
			return self.names[name]
		raise AttributeError(name)

	def __iter__(self):
		return iter(self.values)

	def __len__(self):
		return len(self.values)

	def __repr__(self):
		return "<Enum Type {}>".format(self.__name__)
	__str__ = __repr__


class Enum(metaclass=_EnumMeta):
	"""Useful class attributes:
		values : list of enum values (ie. instances of this type), in definition order
		names : dict mapping string names to values
	Each value has a name, and an index giving its position in values.
	"""
	__slots__ = ('name', 'index')

	def __new__(cls, name):
		if cls._closed:
			raise TypeError("Enum type {} is closed, cannot add {!r}".format(cls.__name__, name))
		if name in cls.names:
			raise ValueError("Enum value {} already exists".format(cls.names[name]))
		obj = super(Enum, cls).__new__(cls)
		object.__setattr__(obj, 'name', name)
		object.__setattr__(obj, 'index', len(cls.values))
		cls.values.append(obj)
		return obj

	@classmethod
	def define(cls, *names):
		"""Nice method for defining a new name, may be cleaner to read than simply instantiating."""
		for name in names:
			cls(name)

	def __setattr__(self, attr, value):
		raise AttributeError("Enum values are immutable")

	def __delattr__(self, attr):
		raise AttributeError("Enum values are immutable")

	def __reduce__(self):
		# unpickle to the existing value, not a new one
		return getattr, (type(self), self.name)

	def __repr__(self):
		return "<Enum {}.{}>".format(type(self).__name__, self.name)

	def __str__(self):
		return self.name
