"""
Fakes shared by the unit tests. FakeHTTP stands in for the
HTTPConnection and HTTPSConnection classes a StandardClient keeps as
attributes; it hands out queued responses and records every request.

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
import time

from ucloudstorage.client.standardclient import StandardClient


AUTH_URL = 'https://example/auth'
AUTH_USER = 'acct:tester'
AUTH_KEY = 'secret'
STORAGE_URL = 'https://store/v1/AUTH_t'
ACCOUNT_URL = 'https://store/auth/v2/acct'
AUTH_TOKEN = 'tok123'


class FakeResponse(object):

    def __init__(self, status=200, reason='OK', headers=None, body=b''):
        self.status = status
        self.reason = reason
        self.headers = list((headers or {}).items())
        self.fp = io.BytesIO(body)
        self.closed = False
        #: Raised by read and iteration instead of returning the body.
        self.read_error = None

    def getheaders(self):
        return list(self.headers)

    def read(self, size=-1):
        if self.read_error:
            raise self.read_error
        return self.fp.read(size)

    def __iter__(self):
        if self.read_error:
            raise self.read_error
        return iter(self.fp)

    def close(self):
        self.closed = True


class FakeRequest(object):

    def __init__(self, netloc, method, path):
        self.netloc = netloc
        self.method = method
        self.path = path
        self.header_list = []
        self.body = b''
        self.tunnel = None

    @property
    def headers(self):
        return dict(self.header_list)

    def __repr__(self):
        return 'FakeRequest(%r, %r, %r)' % (
            self.netloc, self.method, self.path)


class FakeConnection(object):

    def __init__(self, http, netloc):
        self.http = http
        self.netloc = netloc
        self.request = None
        self.tunnel = None
        self.closed = False

    def set_tunnel(self, host, port=None):
        self.tunnel = (host, port)

    def putrequest(self, method, path):
        self.request = FakeRequest(self.netloc, method, path)
        self.request.tunnel = self.tunnel
        self.http.requests.append(self.request)

    def putheader(self, header, value):
        self.request.header_list.append((header, value))

    def endheaders(self, message_body=None):
        if message_body:
            self.request.body += message_body

    def send(self, data):
        self.request.body += data

    def getresponse(self):
        if not self.http.responses:
            raise AssertionError('No response queued for %r' % self.request)
        response = self.http.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        self.http.served.append(response)
        return response

    def close(self):
        self.closed = True


class FakeHTTP(object):
    """
    Called like an HTTPConnection class; every connection it makes
    shares its response queue and request log.
    """

    def __init__(self):
        self.responses = []
        self.requests = []
        self.served = []
        self.connections = []

    def __call__(self, netloc):
        conn = FakeConnection(self, netloc)
        self.connections.append(conn)
        return conn

    def respond(self, status=200, reason='OK', headers=None, body=b''):
        response = FakeResponse(status, reason, headers, body)
        self.responses.append(response)
        return response

    def fail(self, err):
        self.responses.append(err)

    def respond_auth(self, storage_url=STORAGE_URL, token=AUTH_TOKEN,
                     expires='3600'):
        headers = {}
        if storage_url is not None:
            headers['X-Storage-Url'] = storage_url
        if token is not None:
            headers['X-Auth-Token'] = token
        if expires is not None:
            headers['X-Auth-Token-Expires'] = expires
        return self.respond(200, 'OK', headers)


def fake_client(auth_url=AUTH_URL, auth_user=AUTH_USER, auth_key=AUTH_KEY,
                **kwargs):
    """
    Returns (client, http) where client is a StandardClient that talks
    to the FakeHTTP http instead of the network.
    """
    kwargs.setdefault('eventlet', False)
    client = StandardClient(
        auth_url=auth_url, auth_user=auth_user, auth_key=auth_key, **kwargs)
    http = FakeHTTP()
    client.HTTPConnection = http
    client.HTTPSConnection = http
    return client, http


def authenticated_client(**kwargs):
    """
    Returns (client, http) like fake_client but with a session good for
    the next hour already in place.
    """
    client, http = fake_client(**kwargs)
    client.storage_url = STORAGE_URL
    client.account_url = ACCOUNT_URL if client.account_name else None
    client.auth_token = AUTH_TOKEN
    client.auth_token_expires = time.time() + 3600
    return client, http
