# Copyright © 2015-2018 STRG.AT GmbH, Vienna, Austria
#
# This file is part of the The SCORE Framework.
#
# The SCORE Framework and all its parts are free software: you can redistribute
# them and/or modify them under the terms of the GNU Lesser General Public
# License version 3 as published by the Free Software Foundation which is in the
# file named COPYING.LESSER.txt.
#
# The SCORE Framework and all its parts are distributed without any WARRANTY;
# without even the implied warranty of MERCHANTABILITY or FITNESS FOR A
# PARTICULAR PURPOSE. For more details see the GNU Lesser General Public
# License.
#
# If you have not received a copy of the GNU Lesser General Public License see
# http://www.gnu.org/licenses/.
#
# The License-Agreement realised between you as Licensee and STRG.AT GmbH as
# Licenser including the issue of its valid conclusion and its pre- and
# post-contractual effects is governed by the laws of Austria. Any disputes
# concerning this License-Agreement including the issue of its valid conclusion
# and its pre- and post-contractual effects are exclusively decided by the
# competent court, in whose district STRG.AT GmbH has its registered seat, at
# the discretion of STRG.AT GmbH also the competent court, in whose district the
# Licensee has his registered seat, an establishment or assets.

from collections import OrderedDict
from concurrent.futures import Future
import threading


class CacheError(Exception):
    """
    Raised by :meth:`DescriptorCache.get` if the factory creating a missing
    entry failed. The original exception is available as ``__cause__``.
    """


class DescriptorCache:
    """
    A size-limited mapping of :class:`identifiers
    <score.resourcehandler.identifier.ResourceIdentifier>` to :class:`resource
    descriptors <score.resourcehandler.descriptor.ResourceDescriptor>`.

    Missing entries are created by the factory passed to :meth:`get`. The
    factory is invoked only once per key, even if multiple threads request the
    same key at the same time: all other threads wait for the result of the
    first one. Once the cache holds more than *max_size* entries, the least
    recently used ones are evicted.
    """

    DEFAULT_MAX_SIZE = 1000

    def __init__(self, max_size=DEFAULT_MAX_SIZE):
        if max_size < 1:
            raise ValueError('Invalid max_size %d' % max_size)
        self.max_size = max_size
        self._lock = threading.Lock()
        self._entries = OrderedDict()
        # keys currently under construction, mapped to Future objects
        self._pending = {}

    def get(self, key, factory):
        """
        Returns the entry for *key*, creating it with the zero-argument
        callable *factory* if it does not exist yet.
        """
        with self._lock:
            try:
                value = self._entries[key]
            except KeyError:
                pass
            else:
                self._entries.move_to_end(key)
                return value
            future = self._pending.get(key)
            if future is None:
                future = self._pending[key] = Future()
                owner = True
            else:
                owner = False
        if not owner:
            try:
                return future.result()
            except Exception as e:
                raise CacheError(
                    'Exception while creating cache entry for %r' % (key,)
                ) from e
        try:
            value = factory()
        except BaseException as e:
            with self._lock:
                del self._pending[key]
            future.set_exception(e)
            if not isinstance(e, Exception):
                raise
            raise CacheError(
                'Exception while creating cache entry for %r' % (key,)) from e
        with self._lock:
            del self._pending[key]
            self._entries[key] = value
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)
        future.set_result(value)
        return value

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __contains__(self, key):
        with self._lock:
            return key in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)
