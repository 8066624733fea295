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
import io
import unittest
from unittest import mock

from ucloudstorage.cli.cli import CLI
from ucloudstorage.client.standardclient import StandardClient
from ucloudstorage.test.unit import AUTH_KEY, AUTH_URL, AUTH_USER, FakeHTTP


class CLITestCase(unittest.TestCase):
    """
    Runs the CLI against a FakeHTTP; self.http holds the queued
    responses and the recorded requests.
    """

    def setUp(self):
        self.http = FakeHTTP()
        self.clients = []

        def make_client(*args, **kwargs):
            kwargs['eventlet'] = False
            client = StandardClient(*args, **kwargs)
            client.HTTPConnection = self.http
            client.HTTPSConnection = self.http
            self.clients.append(client)
            return client

        patcher = mock.patch('ucloudstorage.cli.cli.StandardClient',
                             make_client)
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_cli(self, *args, **kwargs):
        """
        Runs the command line args with the test credentials first and
        returns (exit_code, stdout_bytes, stderr_str).
        """
        stdin = io.TextIOWrapper(io.BytesIO(kwargs.get('stdin', b'')))
        stdout = io.TextIOWrapper(
            io.BytesIO(), encoding='utf8', write_through=True)
        stderr = io.StringIO()
        if kwargs.get('credentials', True):
            args = ('-A', AUTH_URL, '-U', AUTH_USER, '-K', AUTH_KEY) + args
        rv = CLI()(list(args), stdin=stdin, stdout=stdout, stderr=stderr)
        stdout.flush()
        return rv, stdout.buffer.getvalue(), stderr.getvalue()
