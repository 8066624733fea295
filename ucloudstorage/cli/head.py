"""
Contains a CLICommand that can issue HEAD requests.

Uses the following from :py:class:`ucloudstorage.cli.context.CLIContext`:

=======================  ============================================
client_manager           For connecting to the storage service.
headers                  A dict of headers to send.
ignore_404               True if 404s should be silently ignored.
io_manager               For directing output.
muted_account_headers    The headers to omit when outputting account
                         headers.
muted_container_headers  The headers to omit when outputting
                         container headers.
muted_object_headers     The headers to omit when outputting object
                         headers.
query                    A dict of query parameters to send.
refresh_within           Authenticate first if the token expires
                         sooner than this many seconds.
write_headers            A function used to output the response
                         headers.
=======================  ============================================
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
from ucloudstorage.cli.command import CLICommand, ReturnCode, \
    split_path, with_session


def cli_head(context, path=None):
    """
    Performs a HEAD on the item (storage account, container, or
    object).

    See :py:mod:`ucloudstorage.cli.head` for context usage information.

    See :py:class:`CLIHead` for more information.
    """
    container, obj = split_path(path)
    with with_session(context) as client:
        if not container:
            status, reason, headers, contents = client.peek_storage(
                headers=context.headers, query=context.query)
            mute = context.muted_account_headers
            what = 'heading account'
        elif not obj:
            status, reason, headers, contents = client.peek_container(
                container, headers=context.headers, query=context.query)
            mute = context.muted_container_headers
            what = 'heading container %r' % container
        else:
            status, reason, headers, contents = client.peek_object(
                container, obj, headers=context.headers,
                query=context.query)
            mute = context.muted_object_headers
            what = 'heading object %r' % ('%s/%s' % (container, obj))
    if status // 100 != 2:
        if status == 404 and context.ignore_404:
            return
        raise ReturnCode('%s: %s %s' % (what, status, reason))
    with context.io_manager.with_stdout() as fp:
        context.write_headers(fp, headers, mute)


class CLIHead(CLICommand):
    """
    A CLICommand that can issue HEAD requests.

    See the output of ``ucloudstorage help head`` for more information.
    """

    def __init__(self, cli):
        super(CLIHead, self).__init__(
            cli, 'head', max_args=1, usage="""
Usage: %prog [main_options] head [options] [path]

For help on [main_options] run %prog with no args.

Outputs the resulting headers from a HEAD request of the [path] given. If no
[path] is given, a HEAD request on the storage account is performed.""".strip())
        self.add_header_and_query_options()
        self.option_parser.add_option(
            '--ignore-404', dest='ignore_404', action='store_true',
            help='Ignores 404 Not Found responses. Nothing will be output, '
                 'but the exit code will be 0 instead of 1.')

    def __call__(self, args):
        options, args, context = self.parse_args_and_create_context(args)
        context.ignore_404 = options.ignore_404
        path = args.pop(0) if args else None
        return cli_head(context, path)
