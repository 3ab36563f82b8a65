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

"""
This module stores transformed versions of resources--the ones with evaluated
expressions and the gzip compressed ones--on the file system. The files are
created once per :class:`ResourceDescriptor
<score.resourcehandler.descriptor.ResourceDescriptor>` and served on all
following requests.
"""

import gzip
import logging
import os
import textwrap

from .utils import BUFFER_SIZE, pipe_bytes


log = logging.getLogger(__name__)


class TransformationStore:
    """
    Manages the cache folder beneath the temporary directory *tmpdir*. The
    folder may be removed between two runs of the application, but must not
    be shared between multiple processes. The layout of the folder is::

        relative-resource-handler-cache/
            [<locale>/]<library>/<name>.evaluated
            [<locale>/]<library>/<name>.gzip
    """

    CACHE_BASE_DIR = 'relative-resource-handler-cache'
    EVALUATED_SUFFIX = '.evaluated'
    COMPRESSED_SUFFIX = '.gzip'

    def __init__(self, tmpdir):
        self.tmpdir = tmpdir
        self.folder = os.path.join(tmpdir, self.CACHE_BASE_DIR)
        os.makedirs(self.folder, exist_ok=True)
        warning = os.path.join(self.folder, 'README.txt')
        with open(warning, 'w') as fp:
            fp.write(textwrap.dedent(
                'This folder is managed by the python module '
                'score.resourcehandler.\n\n'
                'Its content is re-created on demand, but it must not be '
                'shared between processes.'
            ).strip())

    def _file(self, resource_file_path, suffix):
        return os.path.join(self.folder, *resource_file_path.split('/')) + \
            suffix

    def evaluated_file(self, resource_file_path):
        """
        Path of the file containing the resource with all expressions
        evaluated. The *resource_file_path* is the relative path of the
        resource (``[<locale>/]<library>/<name>``).
        """
        return self._file(resource_file_path, self.EVALUATED_SUFFIX)

    def compressed_file(self, resource_file_path):
        """
        Path of the gzip compressed version of a resource.
        """
        return self._file(resource_file_path, self.COMPRESSED_SUFFIX)

    def write(self, target, source):
        """
        Writes the content of the binary stream *source* to the file *target*,
        replacing any existing file.
        """
        self._write(target, source, lambda fp: fp)

    def write_compressed(self, target, source):
        """
        Like :meth:`write`, but compresses the content using gzip.
        """
        self._write(target, source,
                    lambda fp: gzip.GzipFile(fileobj=fp, mode='wb'))

    def _write(self, target, source, wrap):
        os.makedirs(os.path.dirname(target), exist_ok=True)
        if os.path.exists(target):
            os.unlink(target)
        try:
            with open(target, 'wb') as fp:
                writer = wrap(fp)
                try:
                    pipe_bytes(source, writer, BUFFER_SIZE)
                finally:
                    if writer is not fp:
                        writer.close()
        except BaseException:
            # existing artifacts are always complete
            if os.path.exists(target):
                os.unlink(target)
            raise
        log.debug('Created %s', target)
