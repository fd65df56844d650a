import types
from functools import wraps


def notify_exception_method_wrapper(listener):

    def wrapper_factory(func):
        """
        wraps a function to provide a callback when an exception occurs.
        The exception is passed to the listener and then re-raised.
        """
        @wraps(func)
        def wrapped(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                listener(e)
                raise

        return wrapped

    return wrapper_factory


def make_exception_notify_proxy(target, listener):
    return MethodWrappingProxy(target, notify_exception_method_wrapper(listener))


class MethodWrappingProxy(object):
    """
    Proxies attribute access to a target object, passing each bound method through the wrapper.
    """

    def __init__(self, target, wrapper):
        self._wrapper = wrapper
        self._target = target

    def __getattribute__(self, name):
        target = object.__getattribute__(self, "_target")
        attr = getattr(target, name)
        if isinstance(attr, (types.MethodType, types.BuiltinMethodType)):
            wrapper = object.__getattribute__(self, "_wrapper")
            attr = wrapper(attr)
        return attr
