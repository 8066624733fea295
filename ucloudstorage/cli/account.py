"""
Contains a CLICommand for the account and user management calls made
against the account endpoint.

Uses the following from :py:class:`ucloudstorage.cli.context.CLIContext`:

===============  ====================================================
admin            True if a user being put should be an account admin.
client_manager   For connecting to the storage service.
headers          A dict of headers to send.
io_manager       For directing output.
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
from ucloudstorage.cli.command import CLICommand, ReturnCode, with_session


#: The account sub-commands and how many args each takes.
SUB_COMMANDS = {
    None: 0,
    'groups': 0,
    'user': 1,
    'put-user': 2,
    'delete-user': 1}


def cli_account(context, sub_command=None, args=None):
    """
    Performs an account or user management call and outputs the body
    of the response, if any.

    See :py:mod:`ucloudstorage.cli.account` for context usage
    information.

    See :py:class:`CLIAccount` for more information.
    """
    args = args or []
    if sub_command not in SUB_COMMANDS:
        raise ReturnCode('unknown account command %r' % sub_command)
    if len(args) != SUB_COMMANDS[sub_command]:
        raise ReturnCode(
            'account %s requires %s args.' %
            (sub_command, SUB_COMMANDS[sub_command]))
    kwargs = {'headers': context.headers, 'query': context.query}
    with with_session(context) as client:
        if not client.account_name:
            raise ReturnCode(
                'the auth user must be given as account:user.')
        if sub_command is None:
            status, reason, headers, contents = client.read_account(**kwargs)
            what = 'reading account'
        elif sub_command == 'groups':
            status, reason, headers, contents = client.read_groups(**kwargs)
            what = 'reading groups'
        elif sub_command == 'user':
            status, reason, headers, contents = client.read_user(
                args[0], **kwargs)
            what = 'reading user %r' % args[0]
        elif sub_command == 'put-user':
            status, reason, headers, contents = client.update_user(
                args[0], args[1], user_admin=bool(context.admin), **kwargs)
            what = 'putting user %r' % args[0]
        else:
            status, reason, headers, contents = client.delete_user(
                args[0], **kwargs)
            what = 'deleting user %r' % args[0]
    if status // 100 != 2:
        raise ReturnCode('%s: %s %s' % (what, status, reason))
    if contents:
        with context.io_manager.with_stdout() as fp:
            fp.write(contents.decode('utf8', 'replace'))
            if not contents.endswith(b'\n'):
                fp.write('\n')
            fp.flush()


class CLIAccount(CLICommand):
    """
    A CLICommand for account and user management.

    See the output of ``ucloudstorage help account`` for more
    information.
    """

    def __init__(self, cli):
        super(CLIAccount, self).__init__(
            cli, 'account', max_args=3, usage="""
Usage: %prog [main_options] account [options] [command] [args]

For help on [main_options] run %prog with no args.

Manages the account the auth user belongs to; the auth user must be an
account admin given as account:user.

Commands:

    (none)                  Lists the users of the account.
    groups                  Lists the groups of the account.
    user <name>             Outputs the user's information.
    put-user <name> <key>   Creates the user or changes its key; use
                            --admin to make it an account admin.
    delete-user <name>      Deletes the user.""".strip())
        self.add_header_and_query_options()
        self.option_parser.add_option(
            '--admin', dest='admin', action='store_true',
            help='With put-user, makes the user an account admin.')

    def __call__(self, args):
        options, args, context = self.parse_args_and_create_context(args)
        context.admin = options.admin
        sub_command = args.pop(0) if args else None
        return cli_account(context, sub_command, args)
