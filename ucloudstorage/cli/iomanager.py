"""
Contains IOManager for managing access to input, output, and error
file-like objects.
"""
"""
Copyright 2011-2013 Gregory Holt

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""
import contextlib
import os
import sys


class IOManager(object):
    """
    Manages access to IO for :py:mod:`ucloudstorage.cli`.

    Text output (headers, listings, messages) goes through with_stdout
    and with_stderr; object contents go through the binary variants,
    which can also be pointed at a path on disk.

    :param stdin: The file-like object to use for default stdin or
        sys.stdin if None.
    :param stdout: The file-like object to use for default stdout or
        sys.stdout if None.
    :param stderr: The file-like object to use for default stderr or
        sys.stderr if None.
    """

    def __init__(self, stdin=None, stdout=None, stderr=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def _binary(self, fp):
        return getattr(fp, 'buffer', fp)

    def _close(self, item):
        if item not in (self.stdin, self.stdout, self.stderr,
                        self._binary(self.stdin), self._binary(self.stdout)):
            item.close()

    @contextlib.contextmanager
    def with_stdin(self, os_path=None):
        """
        A context manager yielding a binary stdin-suitable file-like
        object, reading from os_path instead if given and not ``-``.
        """
        if os_path and os_path != '-':
            inn = open(os_path, 'rb')
        else:
            inn = self._binary(self.stdin)
        try:
            yield inn
        finally:
            self._close(inn)

    @contextlib.contextmanager
    def with_stdout(self):
        """
        A context manager yielding the text stdout file-like object.
        """
        yield self.stdout

    @contextlib.contextmanager
    def with_stderr(self):
        """
        A context manager yielding the text stderr file-like object.
        """
        yield self.stderr

    @contextlib.contextmanager
    def with_binary_stdout(self, os_path=None):
        """
        A context manager yielding a binary stdout-suitable file-like
        object, writing to os_path instead if given and not ``-``.
        Any missing parent directories of os_path are created.
        """
        if os_path and os_path != '-':
            dirname = os.path.dirname(os_path)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            out = open(os_path, 'wb')
        else:
            out = self._binary(self.stdout)
        try:
            yield out
        finally:
            out.flush()
            self._close(out)
