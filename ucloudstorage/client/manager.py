"""
Contains the ClientManager class that can be used to manage a set of
clients, so that each thread or green thread works with a client, and
thereby a session, of its own.
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
import queue
import threading


class ClientManager(object):
    """
    Hands out clients one caller at a time, creating them as needed and
    keeping released ones, sessions included, for reuse. The most
    recently released client is handed out first since its session is
    the most likely to still be valid.

    :param client_class: The class to create when a new client is
        needed, such as
        :py:class:`ucloudstorage.client.standardclient.StandardClient`.
    :param args: The args for the client constructor.
    :param kwargs: The keyword args for the client constructor. Each
        client gets its own number appended to any verbose_id given.
    """

    def __init__(self, client_class, *args, **kwargs):
        self.client_class = client_class
        self.args = args
        self.kwargs = kwargs
        self.clients = queue.LifoQueue()
        self.client_count = 0
        self._count_lock = threading.Lock()

    def get_client(self):
        """
        Obtains a client for use, an idle one if available or a
        brand new, unauthenticated one otherwise.
        """
        try:
            return self.clients.get(block=False)
        except queue.Empty:
            pass
        with self._count_lock:
            self.client_count += 1
            client_number = self.client_count
        kwargs = dict(self.kwargs)
        kwargs['verbose_id'] = (
            kwargs.get('verbose_id', '') + str(client_number))
        return self.client_class(*self.args, **kwargs)

    def put_client(self, client):
        """
        Releases a client obtained with get_client for reuse;
        with_client does this for you.
        """
        self.clients.put(client)

    @contextlib.contextmanager
    def with_client(self, refresh_within=None):
        """
        A context manager yielding a client for use and releasing it
        afterwards, even if the block raised; failed operations never
        touch a client's session.

        :param refresh_within: If given, the client's session is first
            renewed with
            :py:func:`ucloudstorage.client.client.Client.refresh` unless
            it stays valid for this many more seconds.
        """
        client = self.get_client()
        try:
            if refresh_within is not None:
                client.refresh(within=refresh_within)
            yield client
        finally:
            self.put_client(client)
