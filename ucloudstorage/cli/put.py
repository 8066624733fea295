"""
Contains a CLICommand that can issue PUT requests.

Uses the following from :py:class:`ucloudstorage.cli.context.CLIContext`:

===============  ====================================================
client_manager   For connecting to the storage service.
empty            True if a zero-byte object should be PUT.
headers          A dict of headers to send.
input_           The path to read object contents from; by default
                 they come from standard input.
io_manager       For reading object contents.
query            A dict of query parameters to send.
refresh_within   Authenticate first if the token expires sooner than
                 this many seconds.
===============  ====================================================
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
import os

from ucloudstorage.cli.command import CLICommand, ReturnCode, \
    split_path, with_session


def cli_put_container(context, container):
    """
    Performs a PUT on the container, creating it if needed.

    See :py:mod:`ucloudstorage.cli.put` for context usage information.

    See :py:class:`CLIPut` for more information.
    """
    with with_session(context) as client:
        status, reason, headers, contents = client.update_container(
            container, headers=context.headers, query=context.query)
    if status // 100 != 2:
        raise ReturnCode(
            'putting container %r: %s %s' % (container, status, reason))


def cli_put_object(context, container, obj):
    """
    Performs a PUT on the object, sending standard input or the
    context.input_ file as its contents. Contents of unknown size are
    streamed with chunked transfer encoding.

    See :py:mod:`ucloudstorage.cli.put` for context usage information.

    See :py:class:`CLIPut` for more information.
    """
    headers = dict(context.headers or {})
    with with_session(context) as client:
        if context.empty:
            status, reason, hdrs, contents = client.update_object(
                container, obj, b'', headers=headers, query=context.query)
        else:
            if context.input_ and context.input_ != '-' and \
                    'content-length' not in headers:
                headers['content-length'] = str(
                    os.path.getsize(context.input_))
            with context.io_manager.with_stdin(context.input_) as fp:
                status, reason, hdrs, contents = client.update_object(
                    container, obj, fp, headers=headers,
                    query=context.query)
    if status // 100 != 2:
        raise ReturnCode(
            'putting object %r: %s %s' %
            ('%s/%s' % (container, obj), status, reason))


def cli_put(context, path):
    """
    Performs a PUT on the item (container or object).

    See :py:mod:`ucloudstorage.cli.put` for context usage information.

    See :py:class:`CLIPut` for more information.
    """
    container, obj = split_path(path)
    if not container:
        raise ReturnCode('putting the storage account is not supported.')
    if not obj:
        return cli_put_container(context, container)
    return cli_put_object(context, container, obj)


class CLIPut(CLICommand):
    """
    A CLICommand that can issue PUT requests.

    See the output of ``ucloudstorage help put`` for more information.
    """

    def __init__(self, cli):
        super(CLIPut, self).__init__(
            cli, 'put', min_args=1, max_args=1, usage="""
Usage: %prog [main_options] put [options] <path>

For help on [main_options] run %prog with no args.

Performs a PUT request on the <path> given. If the <path> is an object, the
contents for the object are read from standard input.""".strip())
        self.add_header_and_query_options()
        self.option_parser.add_option(
            '-i', '--input', dest='input_', metavar='PATH',
            help='Indicates where to read the contents from; default is '
                 'standard input.')
        self.option_parser.add_option(
            '-e', '--empty', dest='empty', action='store_true',
            help='Indicates a zero-byte object should be PUT.')

    def __call__(self, args):
        options, args, context = self.parse_args_and_create_context(args)
        context.input_ = options.input_
        context.empty = options.empty
        return cli_put(context, args.pop(0))
