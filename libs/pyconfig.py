"""A module for performing global program configuration.

Config files are fully fledged python source files,
and their global namespace becomes the config dict.

Modules that want a config option should register() it, which sets its default
and picks up any value already given by the environment.
The global CONF object holds the options used by the modules of this library:
	derived_overrides: What to do when a @comparable class defines an operator that
	                   is always derived: 'warn' (replace it and log a warning) or 'error'.
	resolution_cache: Whether OperatorTables cache the result of resolving an operator.
	log_level: Logging level used when running a module as a script.
"""

import os
from collections import namedtuple
from pprint import pformat
import types


Registration = namedtuple('Registration', ['env_vars', 'map_fn'])


def parse_bool(value):
	"""A map_fn for boolean options given as strings (eg. from env vars)"""
	if isinstance(value, bool):
		return value
	value = value.strip().lower()
	if value in ('1', 'true', 'yes', 'on'):
		return True
	if value in ('0', 'false', 'no', 'off', ''):
		return False
	raise ValueError("Not a boolean value: {!r}".format(value))


def one_of(*choices):
	"""Returns a map_fn that only allows the given (case-insensitive) string choices"""
	def map_fn(value):
		value = value.strip().lower()
		if value not in choices:
			raise ValueError("{!r} is not one of {}".format(value, ', '.join(choices)))
		return value
	return map_fn


class Config(dict):
	"""Represents a single configuration dict. Contains extra methods for help
	with loading config.
	All load and from_* methods will perform an *update* operation - ie. order matters.

	Keys can be accessed with standard dict methods, or alternately via attribute access.
	You should ensure the attribute you're trying to access doesn't conflict with any
	pre-existing attribute or method.
	Keys retrieved with this method will return None if not present.
	"""

	def __init__(self, *args, **kwargs):
		super(Config, self).__init__(*args, **kwargs)
		self.registered = {}

	def __getattr__(self, name):
		if name in self:
			return self[name]
		return None

	def load(self, conf_file=None, env=None, **kwargs):
		"""Populate the config object from the sources specified by kwargs:
		Source kwargs in order of precedence (least overriding first):
			conf_file: Load items from given filepath or list of filepaths.
			           See from_file().
			env: Load items from given environment dict, or os.environ if this option is True.
			     See from_env().
			Any extra keys passed as kwargs to this function.
		"""
		if conf_file:
			if isinstance(conf_file, str):
				conf_file = conf_file,
			self.from_file(*conf_file)

		if env:
			self.from_env(None if env is True else env)

		self.update(kwargs)

	def from_file(self, *conf_files):
		"""Update config from given conf files, in order (ie. last overrides all others).
		conf files should be python source files, which will be executed with this object
		as their global namespace.
		Note that user expansion is performed on the file paths.
		We set the global "config" to this object, avoiding the need for explicit globals() calls.
		Note that errors in the sourced files *will* be allowed to raise.
		"""
		for conf_file in conf_files:
			path = os.path.expanduser(conf_file)
			with open(path) as f:
				source = f.read()
			before = dict(self)
			namespace = dict(before, config=self)
			exec(compile(source, path, 'exec'), namespace)
			for name, value in namespace.items():
				if name in ('config', '__builtins__'):
					continue
				# don't clobber anything the file set via config directly
				if name not in before or before[name] is not value:
					self[name] = value

	def from_env(self, env=None, registered_only=True):
		"""Update config from the given environment dict (default os.environ).
		If any environment vars match an option registered with self.register(),
		that option is set from that env var's value (see register()).
		Other vars are ignored unless registered_only is False, in which case they are used as is.
		"""
		if env is None:
			env = os.environ

		registered_vars = set()
		for name, reg in self.registered.items():
			registered_vars.update(reg.env_vars)
			for var in reg.env_vars:
				if var in env:
					self[name] = self.apply_map(name, env[var])
					break

		if not registered_only:
			for var, value in env.items():
				if var not in registered_vars:
					self[var] = value

	def register(self, name, env_vars=[], default=None, map_fn=None, env=None):
		"""Register a config option with some extra helper information:
			env_vars: Environment vars (in order of precedence) to treat as meaning this option,
			          eg. register('filepath', env_vars=['MYPROG_FPATH'])
			default: The default value to take if not given (cannot be None).
			map_fn: Optional function to map the given value of the option to a usable value.
			        For example, an option that is intended to be an integer will have a string
			        value if it is populated from an env var.
			        If map_fn=int, the value will be converted to int before being used.
			        NOTE: The map_fn will only be applied to values loaded from env.
			env: Environment dict to check for the option right away (default os.environ).
			     A value found there overrides the default.
		"""
		self.registered[name] = Registration(list(env_vars), map_fn)
		if default is not None:
			self.setdefault(name, default)
		if env is None:
			env = os.environ
		for var in env_vars:
			if var in env:
				self[name] = self.apply_map(name, env[var])
				break

	def get_registered(self):
		"""Returns a dict containing only registered config options.
		This may be useful to seperate actual options from side-effects of file exec
		(such as modules and other incidential global variables) when logging or
		formatting a report."""
		return {name: self[name] for name in self.registered if name in self}

	def get_most(self):
		"""Makes an educated guess at what keys are "important" and which are side effects
		of file exec, without relying on an explicit register for all items.
		Strips out:
			itself
			all modules
			vars starting with _
		"""
		return {name: self[name] for name in self if all((
			self[name] is not self,
			not isinstance(self[name], types.ModuleType),
			not name.startswith('_'),
		))}

	def format(self):
		"""Returns a human-readable formatted string representing the config contents."""
		return pformat(self.get_most())

	def apply_map(self, name, value):
		"""Helper function that applies the map_fn for name (if any) to value."""
		map_fn = None
		if name in self.registered:
			map_fn = self.registered[name].map_fn
		if map_fn:
			return map_fn(value)
		return value


# We make available a default config object as a global
CONF = Config()
