"""
Contains a CLICommand that can issue DELETE requests.

Uses the following from :py:class:`ucloudstorage.cli.context.CLIContext`:

===============  ====================================================
client_manager   For connecting to the storage service.
headers          A dict of headers to send.
ignore_404       True if 404s should be silently ignored.
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
from ucloudstorage.cli.command import CLICommand, ReturnCode, \
    split_path, with_session


def cli_delete(context, path):
    """
    Deletes the item (container or object). A container must be empty
    for the service to delete it.

    See :py:mod:`ucloudstorage.cli.delete` for context usage
    information.

    See :py:class:`CLIDelete` for more information.
    """
    container, obj = split_path(path)
    if not container:
        raise ReturnCode('deleting the storage account is not supported.')
    with with_session(context) as client:
        if not obj:
            status, reason, headers, contents = client.delete_container(
                container, headers=context.headers, query=context.query)
            what = 'deleting container %r' % container
        else:
            status, reason, headers, contents = client.delete_object(
                container, obj, headers=context.headers, query=context.query)
            what = 'deleting object %r' % ('%s/%s' % (container, obj))
    if status // 100 != 2:
        if status == 404 and context.ignore_404:
            return
        raise ReturnCode('%s: %s %s' % (what, status, reason))


class CLIDelete(CLICommand):
    """
    A CLICommand that can issue DELETE requests.

    See the output of ``ucloudstorage help delete`` for more information.
    """

    def __init__(self, cli):
        super(CLIDelete, self).__init__(
            cli, 'delete', min_args=1, max_args=1, usage="""
Usage: %prog [main_options] delete [options] <path>

For help on [main_options] run %prog with no args.

Issues a DELETE request of the <path> given.""".strip())
        self.add_header_and_query_options()
        self.option_parser.add_option(
            '--ignore-404', dest='ignore_404', action='store_true',
            help='Ignores 404 Not Found responses; the exit code will be 0 '
                 'instead of 1.')

    def __call__(self, args):
        options, args, context = self.parse_args_and_create_context(args)
        context.ignore_404 = options.ignore_404
        return cli_delete(context, args.pop(0))
