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
import time
import unittest
from http.client import IncompleteRead
from unittest import mock

from ucloudstorage.client import utils
from ucloudstorage.client.client import Client, SessionInfo
from ucloudstorage.client.errors import AuthenticationError, \
    MissingExpiryError, NotAuthenticatedError, ProtocolError, TransportError
from ucloudstorage.test.unit import ACCOUNT_URL, AUTH_TOKEN, STORAGE_URL, \
    authenticated_client, fake_client


class TestConstruction(unittest.TestCase):

    def test_requires_credentials(self):
        self.assertRaises(ValueError, Client, None, 'u', 'k')
        self.assertRaises(ValueError, Client, 'https://a/auth', '', 'k')
        self.assertRaises(ValueError, Client, 'https://a/auth', 'u', None)

    def test_account_name(self):
        self.assertEqual(
            Client('https://a/auth', 'acct:user', 'k').account_name, 'acct')
        self.assertEqual(
            Client('https://a/auth', 'user', 'k').account_name, None)

    def test_request_not_implemented(self):
        client = Client('https://a/auth', 'u', 'k')
        self.assertRaises(Exception, client.request, 'GET', 'https://a/', {})


class TestAuthenticate(unittest.TestCase):

    def test_scenario(self):
        client, http = fake_client(auth_user='tester')
        self.assertFalse(client.is_valid())
        http.respond_auth()
        before = time.time()
        info = client.authenticate()
        self.assertTrue(isinstance(info, SessionInfo))
        self.assertEqual(client.storage_url, STORAGE_URL)
        self.assertEqual(client.auth_token, AUTH_TOKEN)
        self.assertEqual(info.storage_url, STORAGE_URL)
        self.assertEqual(info.auth_token, AUTH_TOKEN)
        self.assertTrue(client.is_valid())
        self.assertTrue(client.is_valid(before + 3000))
        self.assertFalse(client.is_valid(time.time() + 3700))
        self.assertTrue(client.is_valid_for(3000))
        self.assertFalse(client.is_valid_for(3700))
        self.assertEqual(client.account_url, None)
        self.assertEqual(len(http.requests), 1)
        request = http.requests[0]
        self.assertEqual(request.netloc, 'example')
        self.assertEqual(request.method, 'GET')
        self.assertEqual(request.path, '/auth')
        self.assertEqual(request.headers['X-Auth-User'], 'tester')
        self.assertEqual(request.headers['X-Auth-Key'], 'secret')
        self.assertTrue('X-Auth-New-Token' not in request.headers)
        self.assertTrue(http.served[0].closed)

    def test_new_token(self):
        client, http = fake_client()
        http.respond_auth()
        client.authenticate(new_token=True)
        self.assertEqual(
            http.requests[0].headers['X-Auth-New-Token'], 'true')

    def test_account_url(self):
        client, http = fake_client()
        http.respond_auth()
        client.authenticate()
        self.assertEqual(client.account_url, ACCOUNT_URL)

    def test_session_info(self):
        client, http = fake_client()
        self.assertEqual(client.session_info(), None)
        http.respond_auth()
        info = client.authenticate()
        self.assertEqual(client.session_info(), info)

    def test_zero_expiry(self):
        client, http = fake_client()
        http.respond_auth(expires='0')
        client.authenticate()
        self.assertFalse(client.is_valid_for(1))

    def _assert_session_kept(self, client, before):
        self.assertEqual(
            (client.storage_url, client.account_url, client.auth_token,
             client.auth_token_expires), before)

    def _session(self, client):
        return (client.storage_url, client.account_url, client.auth_token,
                client.auth_token_expires)

    def test_failure_status(self):
        client, http = authenticated_client()
        before = self._session(client)
        http.respond(401, 'Unauthorized')
        try:
            client.authenticate()
        except AuthenticationError as err:
            self.assertEqual(err.status, 401)
            self.assertEqual(err.reason, 'Unauthorized')
        else:
            self.fail('AuthenticationError not raised')
        self._assert_session_kept(client, before)
        self.assertTrue(http.served[0].closed)

    def test_failure_leaves_no_session(self):
        client, http = fake_client()
        http.respond(403, 'Forbidden')
        self.assertRaises(AuthenticationError, client.authenticate)
        self.assertFalse(client.is_valid())
        self.assertEqual(client.session_info(), None)

    def test_missing_storage_url(self):
        client, http = authenticated_client()
        before = self._session(client)
        http.respond_auth(storage_url=None)
        self.assertRaises(AuthenticationError, client.authenticate)
        self._assert_session_kept(client, before)

    def test_missing_token(self):
        client, http = authenticated_client()
        before = self._session(client)
        http.respond_auth(token=None)
        self.assertRaises(AuthenticationError, client.authenticate)
        self._assert_session_kept(client, before)

    def test_missing_expiry(self):
        client, http = authenticated_client()
        before = self._session(client)
        http.respond_auth(
            storage_url='https://other/v1/AUTH_x', token='other',
            expires=None)
        self.assertRaises(ProtocolError, client.authenticate)
        self._assert_session_kept(client, before)
        http.respond_auth(expires=None)
        self.assertRaises(AuthenticationError, client.authenticate)
        http.respond_auth(expires=None)
        self.assertRaises(MissingExpiryError, client.authenticate)
        self._assert_session_kept(client, before)

    def test_invalid_expiry(self):
        for expires in ('soon', '1.5', '-5'):
            client, http = authenticated_client()
            before = self._session(client)
            http.respond_auth(token='other', expires=expires)
            self.assertRaises(ProtocolError, client.authenticate)
            self._assert_session_kept(client, before)

    def test_transport_failure(self):
        client, http = authenticated_client()
        before = self._session(client)
        http.fail(ConnectionRefusedError('refused'))
        self.assertRaises(TransportError, client.authenticate)
        self._assert_session_kept(client, before)

    def test_body_read_failure(self):
        client, http = authenticated_client()
        before = self._session(client)
        err = IncompleteRead(b'par', 10)
        http.respond_auth(token='other').read_error = err
        with self.assertRaises(TransportError) as cm:
            client.authenticate()
        self.assertTrue(cm.exception.__cause__ is err)
        self._assert_session_kept(client, before)
        self.assertTrue(http.served[0].closed)

    def test_invalidate(self):
        client, http = authenticated_client()
        self.assertTrue(client.is_valid())
        client.invalidate()
        self.assertFalse(client.is_valid())
        self.assertEqual(client.session_info(), None)
        self.assertEqual(client.account_url, None)
        self.assertEqual(client.auth_user, 'acct:tester')
        client.invalidate()
        self.assertFalse(client.is_valid())

    def test_refresh_keeps_good_session(self):
        client, http = authenticated_client()
        self.assertEqual(client.refresh(within=60), None)
        self.assertEqual(http.requests, [])

    def test_refresh_renews_expiring_session(self):
        client, http = authenticated_client()
        client.auth_token_expires = time.time() + 30
        http.respond_auth(token='fresh')
        info = client.refresh(within=60)
        self.assertEqual(info.auth_token, 'fresh')
        self.assertEqual(client.auth_token, 'fresh')

    def test_verbose_masks_key(self):
        messages = []
        client, http = fake_client(
            verbose=lambda msg, *args: messages.append(msg % args),
            verbose_id='c1')
        http.respond_auth()
        client.authenticate()
        self.assertTrue(messages)
        for message in messages:
            self.assertTrue(message.startswith('c1 '), message)
            self.assertTrue('secret' not in message, message)


class TestOperations(unittest.TestCase):

    def test_update_container(self):
        client, http = authenticated_client()
        http.respond(201, 'Created')
        status, reason, headers, contents = client.update_container('c1')
        self.assertEqual((status, reason), (201, 'Created'))
        self.assertEqual(len(http.requests), 1)
        request = http.requests[0]
        self.assertEqual(request.method, 'PUT')
        self.assertEqual(request.netloc, 'store')
        self.assertEqual(request.path, '/v1/AUTH_t/c1')
        self.assertEqual(request.headers['X-Auth-Token'], AUTH_TOKEN)
        self.assertEqual(request.headers['Content-Length'], '0')
        self.assertEqual(request.body, b'')

    def test_delete_object_not_authenticated(self):
        client, http = fake_client()
        self.assertRaises(NotAuthenticatedError, client.delete_object,
                          'c1', 'o1')
        self.assertEqual(http.requests, [])
        self.assertEqual(http.connections, [])

    def test_every_storage_operation_needs_a_session(self):
        client, http = fake_client()
        calls = [
            lambda: client.peek_storage(),
            lambda: client.read_storage(),
            lambda: client.configure_storage(),
            lambda: client.peek_container('c'),
            lambda: client.read_container('c'),
            lambda: client.update_container('c'),
            lambda: client.configure_container('c'),
            lambda: client.delete_container('c'),
            lambda: client.peek_object('c', 'o'),
            lambda: client.read_object('c', 'o'),
            lambda: client.update_object('c', 'o', b'x'),
            lambda: client.configure_object('c', 'o'),
            lambda: client.delete_object('c', 'o'),
            lambda: client.read_account(),
            lambda: client.read_user('u'),
            lambda: client.update_user('u', 'k'),
            lambda: client.delete_user('u'),
            lambda: client.read_groups()]
        for call in calls:
            self.assertRaises(NotAuthenticatedError, call)
        self.assertEqual(http.requests, [])

    def test_func_result_is_returned(self):
        client, http = authenticated_client()
        http.respond(204, 'No Content', {'X-Container-Object-Count': '3'})
        result = client.peek_container(
            'c1', func=lambda resp: ('seen', resp.status))
        self.assertEqual(result, ('seen', 204))
        self.assertTrue(http.served[0].closed)

    def test_body_read_failure(self):
        client, http = authenticated_client()
        http.respond(200, 'OK', body=b'partial').read_error = \
            ConnectionResetError('reset')
        with self.assertRaises(TransportError) as cm:
            client.read_object('c1', 'o1')
        self.assertTrue(
            isinstance(cm.exception.__cause__, ConnectionResetError))
        self.assertTrue(http.served[0].closed)
        self.assertTrue(http.connections[0].closed)
        self.assertTrue(client.is_valid())

    def test_urls_come_from_request_url_builders(self):
        client, http = authenticated_client()
        http.respond(204, 'No Content')
        with mock.patch.object(
                utils, 'object_request_url',
                return_value='https://store/elsewhere') as builder:
            client.peek_object('c1', 'o1', query={'x': 1})
        builder.assert_called_once_with(
            STORAGE_URL, 'c1', 'o1', query={'x': 1})
        self.assertEqual(http.requests[0].path, '/elsewhere')

    def test_func_errors_are_not_wrapped(self):
        client, http = authenticated_client()
        http.respond(200, 'OK', body=b'partial').read_error = \
            ConnectionResetError('reset')
        self.assertRaises(
            ConnectionResetError, client.read_object, 'c1', 'o1',
            func=lambda resp: resp.read())

    def test_status_is_not_interpreted(self):
        client, http = authenticated_client()
        http.respond(404, 'Not Found', body=b'nope')
        self.assertEqual(
            client.read_object('c1', 'o1'),
            (404, 'Not Found', {}, b'nope'))
        self.assertTrue(client.is_valid())

    def test_query_and_headers(self):
        client, http = authenticated_client()
        http.respond(200)
        client.peek_object(
            'c1', 'o1', query={'multipart-manifest': 'get'},
            headers={'if-match': 'abc', 'x-auth-token': 'stale'})
        request = http.requests[0]
        self.assertEqual(request.method, 'HEAD')
        self.assertEqual(
            request.path, '/v1/AUTH_t/c1/o1?multipart-manifest=get')
        self.assertEqual(request.headers['If-Match'], 'abc')
        self.assertEqual(request.headers['X-Auth-Token'], AUTH_TOKEN)
        self.assertTrue('Content-Length' not in request.headers)

    def test_storage_operations(self):
        client, http = authenticated_client()
        for x in range(3):
            http.respond(204)
        client.peek_storage()
        client.read_storage(query={'format': 'json'})
        client.configure_storage(headers={'x-account-meta-color': 'blue'})
        self.assertEqual(
            [(r.method, r.path) for r in http.requests],
            [('HEAD', '/v1/AUTH_t'), ('GET', '/v1/AUTH_t?format=json'),
             ('POST', '/v1/AUTH_t')])
        self.assertEqual(
            http.requests[2].headers['X-Account-Meta-Color'], 'blue')

    def test_container_operations(self):
        client, http = authenticated_client()
        for x in range(4):
            http.respond(204)
        client.read_container('c1')
        client.configure_container('c1', headers={'x-container-read': '.r:*'})
        client.delete_container('c1')
        self.assertEqual(client.delete_container_status('c2'), 204)
        self.assertEqual(
            [(r.method, r.path) for r in http.requests],
            [('GET', '/v1/AUTH_t/c1'), ('POST', '/v1/AUTH_t/c1'),
             ('DELETE', '/v1/AUTH_t/c1'), ('DELETE', '/v1/AUTH_t/c2')])

    def test_object_operations(self):
        client, http = authenticated_client()
        for x in range(4):
            http.respond(201)
        client.update_object('c1', 'o1', b'hello')
        client.update_object('c1', 'empty', None)
        client.configure_object(
            'c1', 'o1', headers={'x-object-meta-color': 'red'})
        client.delete_object('c1', 'o1')
        self.assertEqual(
            [(r.method, r.path, r.body) for r in http.requests],
            [('PUT', '/v1/AUTH_t/c1/o1', b'hello'),
             ('PUT', '/v1/AUTH_t/c1/empty', b''),
             ('POST', '/v1/AUTH_t/c1/o1', b''),
             ('DELETE', '/v1/AUTH_t/c1/o1', b'')])
        self.assertEqual(http.requests[0].headers['Content-Length'], '5')
        self.assertEqual(http.requests[1].headers['Content-Length'], '0')

    def test_update_object_writer(self):
        client, http = authenticated_client()
        http.respond(201)

        def write(writer):
            writer.write(b'abc')
            writer.write('def')

        client.update_object('c1', 'o1', write)
        request = http.requests[0]
        self.assertEqual(request.headers['Transfer-Encoding'], 'chunked')
        self.assertEqual(request.body, b'3\r\nabc\r\n3\r\ndef\r\n0\r\n\r\n')

    def test_names_required(self):
        client, http = authenticated_client()
        self.assertRaises(ValueError, client.read_container, '')
        self.assertRaises(ValueError, client.read_object, 'c1', None)
        self.assertRaises(ValueError, client.read_user, '')
        self.assertRaises(ValueError, client.update_user, 'u1', '')
        self.assertEqual(http.requests, [])

    def test_operation_failure_keeps_session(self):
        client, http = authenticated_client()
        before = client.session_info()
        http.fail(OSError('reset'))
        self.assertRaises(TransportError, client.read_object, 'c1', 'o1')
        self.assertEqual(client.session_info(), before)


class TestAccountOperations(unittest.TestCase):

    def test_read_account(self):
        client, http = authenticated_client()
        http.respond(200, body=b'tester\nadmin\n')
        status, reason, headers, contents = client.read_account()
        self.assertEqual(contents, b'tester\nadmin\n')
        request = http.requests[0]
        self.assertEqual(request.method, 'GET')
        self.assertEqual(request.path, '/auth/v2/acct')
        self.assertEqual(request.headers['X-Auth-Admin-User'], 'acct:tester')
        self.assertEqual(request.headers['X-Auth-Admin-Key'], 'secret')

    def test_user_operations(self):
        client, http = authenticated_client()
        for x in range(4):
            http.respond(200)
        client.read_user('u1')
        client.update_user('u1', 'pw', user_admin=True)
        client.delete_user('u1')
        client.read_groups()
        self.assertEqual(
            [(r.method, r.path) for r in http.requests],
            [('GET', '/auth/v2/acct/u1'), ('PUT', '/auth/v2/acct/u1'),
             ('DELETE', '/auth/v2/acct/u1'), ('GET', '/auth/v2/acct/.groups')])
        put = http.requests[1]
        self.assertEqual(put.headers['X-Auth-User-Key'], 'pw')
        self.assertEqual(put.headers['X-Auth-User-Admin'], 'true')
        self.assertEqual(put.headers['Content-Length'], '0')

    def test_update_user_not_admin(self):
        client, http = authenticated_client()
        http.respond(201)
        client.update_user('u1', 'pw')
        self.assertTrue('X-Auth-User-Admin' not in http.requests[0].headers)

    def test_needs_account_name(self):
        client, http = authenticated_client(auth_user='tester')
        self.assertRaises(ValueError, client.read_account)
        self.assertEqual(http.requests, [])


if __name__ == '__main__':
    unittest.main()
