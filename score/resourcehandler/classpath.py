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

from contextlib import ExitStack
from importlib import resources
import os
from pathlib import Path


class ClassPath:
    """
    An ordered list of root folders, that are searched for resources. Each
    entry is either a folder on the file system or the name of a python
    package prefixed with ``package:``, in which case the folder of the
    package is used::

        classpath = ClassPath([
            '/var/www/shared',
            'package:myapp.static',
        ])
    """

    PACKAGE_PREFIX = 'package:'

    def __init__(self, entries=()):
        self._stack = ExitStack()
        self.roots = []
        for entry in entries:
            self.roots.append(self._resolve_entry(entry))

    def _resolve_entry(self, entry):
        if isinstance(entry, str) and entry.startswith(self.PACKAGE_PREFIX):
            package = entry[len(self.PACKAGE_PREFIX):]
            traversable = resources.files(package)
            return Path(self._stack.enter_context(
                resources.as_file(traversable)))
        return Path(entry).expanduser()

    def close(self):
        self._stack.close()

    def _candidates(self, path):
        path = path.lstrip('/')
        if not path:
            return
        for root in self.roots:
            candidate = root.joinpath(path)
            # paths escaping the root are never part of the classpath
            resolved = os.path.realpath(candidate)
            if os.path.commonpath((resolved, os.path.realpath(root))) != \
                    os.path.realpath(root):
                continue
            if candidate.is_file():
                yield candidate

    def get_resource(self, path):
        """
        Returns the ``file:`` URL of the first file matching the relative
        *path*, or `None` if no root contains such a file.
        """
        for candidate in self._candidates(path):
            return candidate.resolve().as_uri()
        return None

    def get_resources(self, path):
        """
        Returns the URLs of all files matching the relative *path*, in the
        order of the roots.
        """
        return [candidate.resolve().as_uri()
                for candidate in self._candidates(path)]

    def open_resource(self, path):
        """
        Opens the first file matching *path* for binary reading. Returns `None`
        if no such file exists.
        """
        for candidate in self._candidates(path):
            return open(candidate, 'rb')
        return None
