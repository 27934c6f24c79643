# Copyright European Space Agency, 2013

from functools import wraps

def lazy_property(fn):
    """
    Caches the result of a property.

    Works for immutable objects which block attribute assignment,
    the cached value is stored with :func:`object.__setattr__`.
    """
    attr_name = '_lazy_' + fn.__name__
    @property
    @wraps(fn)
    def _lazyprop(self):
        try:
            return object.__getattribute__(self, attr_name)
        except AttributeError:
            value = fn(self)
            object.__setattr__(self, attr_name, value)
            return value
    return _lazyprop
