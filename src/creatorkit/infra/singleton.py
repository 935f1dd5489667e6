import functools


def singleton(func):
    """
    Decorator for a zero-state factory function.
    The first return value is cached on the wrapper; later calls return it
    unchanged.  ``wrapper.reset()`` drops the cached instance (tests use it
    to rebuild registries after patching).
    """
    missing = object()
    instance = missing

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        nonlocal instance
        if instance is missing:
            instance = func(*args, **kwargs)
        return instance

    def reset():
        nonlocal instance
        instance = missing

    wrapper.reset = reset
    return wrapper
