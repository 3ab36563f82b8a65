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

class ResourceIdentifier:
    """
    Uniquely identifies a resource through its *resource_name*, the name of
    the :class:`library <score.resourcehandler.config.Library>` containing it
    and the locale prefix, that was requested by the client (which might be
    `None`).

    Identifiers are used as keys of the :class:`descriptor cache
    <score.resourcehandler.cache.DescriptorCache>`. Sub-classes may add
    further fields, but must then extend :meth:`_key` accordingly.
    """

    def __init__(self, resource_name, library_name, requested_locale_prefix):
        self.resource_name = resource_name
        self.library_name = library_name
        self.requested_locale_prefix = requested_locale_prefix

    def _key(self):
        return (self.resource_name, self.library_name,
                self.requested_locale_prefix)

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return False
        return self._key() == other._key()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__, ' '.join(
            repr(value) for value in self._key()))
