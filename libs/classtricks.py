"""A collection of simple tricks and helper functions for working with classes"""


import builtins
import logging


def issubclass(subcls, supercls):
	"""As per the builtin issubclass(), but will simply return False if either arg is not suitable
	(eg. if subcls is not a class), instead of raising TypeError.
	This is more desired behavour in certain situations, and should not adversely affect existing code.
	"""
	try:
		return builtins.issubclass(subcls, supercls)
	except TypeError:
		return False


def find_definer(cls, name, skip=(object,)):
	"""Returns the class in cls's mro whose own __dict__ defines name, ie. the class
	that getattr(cls, name) would get its value from.
	Classes in skip are treated as not defining anything.
	Returns None if no (non-skipped) class defines name.
	"""
	for supercls in cls.__mro__:
		if name in vars(supercls):
			return None if supercls in skip else supercls
	return None


class HasLogger(object):
	"""A mixin that does some basic logging setup for a class.
	Takes an optional logger kwarg to __init__ (will pass other args to super).
	If not given, this passed logger (henceforth "parent_logger") defaults to root.
	The instance's logger is then parent_logger.getChild(cls name).getChild(instance _get_logger_name()).
	The default implementation of _get_logger_name() returns id(self).
	The instance's logger is available as self.logger, the parent logger as self.parent_logger.
	"""

	def __init__(self, *args, **kwargs):
		self.parent_logger = kwargs.pop('logger', None)
		if not self.parent_logger:
			self.parent_logger = logging.getLogger()
		self.logger = self.parent_logger.getChild(type(self).__name__).getChild(str(self._get_logger_name()))
		super(HasLogger, self).__init__(*args, **kwargs)

	def _get_logger_name(self):
		return id(self)
