"""Process-lifetime memoization for async enhancement calls.

Cache policy:
    - Unbounded, no eviction or TTL; entries live as long as the wrapper.
    - Calls are bound to the wrapped callable's signature (defaults applied)
      before keying, so positional, keyword and defaulted forms of the same
      call share one key.
    - Key is a JSON serialization of the bound arguments with embedded image
      payloads (`data:image...` strings) and `None` values removed, so an
      explicit `None` image matches an omitted image.
    - Entries are written only after the wrapped call resolves. Concurrent
      calls sharing a key before the first one resolves all miss and all
      invoke the wrapped function.

Consequence of the key policy:
    Editing requests that differ only by image share one entry; the first
    resolved answer is served for all of them.
"""

import functools
import inspect
import json
import logging

from prompt_enhancer.llm.provider_config import IMAGE_PAYLOAD_PREFIX


logger = logging.getLogger("prompt_enhancer.trace")


def is_image_payload(value) -> bool:
    """Return whether `value` is an embedded image payload string."""
    return isinstance(value, str) and value.startswith(IMAGE_PAYLOAD_PREFIX)


def _keyable(value) -> bool:
    return value is not None and not is_image_payload(value)


def cache_key(*args, **kwargs) -> str:
    """Build a stable cache key from raw call arguments.

    Image payloads are removed everywhere; trailing positional `None` values
    and `None` keyword values are dropped.
    """
    positional = [arg for arg in args if not is_image_payload(arg)]
    while positional and positional[-1] is None:
        positional.pop()
    named = {name: value for name, value in kwargs.items() if _keyable(value)}
    if not named:
        return json.dumps(positional, default=str)
    return json.dumps({"args": positional, "kwargs": named}, sort_keys=True, default=str)


def bound_cache_key(signature: inspect.Signature, *args, **kwargs) -> str:
    """Build the cache key for a call bound to `signature`.

    Raises:
        TypeError: Arguments do not match the signature.
    """
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()

    named = {}
    for name, value in bound.arguments.items():
        kind = signature.parameters[name].kind
        if kind is inspect.Parameter.VAR_KEYWORD:
            named.update({key: item for key, item in value.items() if _keyable(item)})
        elif kind is inspect.Parameter.VAR_POSITIONAL:
            extra = [item for item in value if not is_image_payload(item)]
            if extra:
                named[name] = extra
        elif _keyable(value):
            named[name] = value

    return json.dumps(named, sort_keys=True, default=str)


class MemoizedEnhancer:
    """Wrap an async callable with an append-only result cache."""

    def __init__(self, func) -> None:
        functools.update_wrapper(self, func)
        self._func = func
        self._cache: dict[str, object] = {}
        try:
            self._signature = inspect.signature(func)
        except (TypeError, ValueError):
            self._signature = None

    def key_for(self, *args, **kwargs) -> str:
        """Return the cache key for a call with these arguments."""
        if self._signature is not None:
            try:
                return bound_cache_key(self._signature, *args, **kwargs)
            except TypeError:
                pass
        return cache_key(*args, **kwargs)

    async def __call__(self, *args, **kwargs):
        key = self.key_for(*args, **kwargs)
        logger.debug("cache key %s", key)

        if key in self._cache:
            logger.debug("cache hit")
            return self._cache[key]

        result = await self._func(*args, **kwargs)
        self._cache[key] = result
        return result

    def has(self, *args, **kwargs) -> bool:
        """Return whether a call with these arguments would be served from cache."""
        return self.key_for(*args, **kwargs) in self._cache

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


def memoize(func) -> MemoizedEnhancer:
    """Decorator form of `MemoizedEnhancer`."""
    return MemoizedEnhancer(func)
