"""
Contains a CLICommand that outputs help information, including the
auth URL aliases the main -A option accepts.

Uses the following from :py:class:`ucloudstorage.cli.context.CLIContext`:

============  ================================
io_manager    For directing output.
============  ================================
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
from ucloudstorage.cli.cli import AUTH_URL_ALIASES
from ucloudstorage.cli.command import CLICommand, ReturnCode


def write_auth_url_aliases(fp, aliases):
    """
    Writes the alias table for the main -A option, one alias per line
    in name order.
    """
    fp.write('Auth URL aliases (-A):\n')
    width = max(len(name) for name in aliases) + 2
    for name in sorted(aliases):
        fp.write('  %s%s\n' % (name.ljust(width), aliases[name]))


def cli_help(context, command_names, general_parser, commands, aliases):
    """
    Outputs the general help and auth URL aliases when no command names
    are given, or the usage of each command named otherwise. Every name
    is checked before anything is output.

    See :py:mod:`ucloudstorage.cli.help` for context usage information.

    See :py:class:`CLIHelp` for more information.
    """
    for name in command_names:
        if name not in commands:
            raise ReturnCode('unknown command %r' % name)
    with context.io_manager.with_stdout() as fp:
        if not command_names:
            general_parser.print_help(fp)
            fp.write('\n')
            write_auth_url_aliases(fp, aliases)
        for index, name in enumerate(command_names):
            if index:
                fp.write('\n')
            commands[name].option_parser.print_help(fp)
        fp.flush()


class CLIHelp(CLICommand):
    """
    A CLICommand that outputs help information.

    See the output of ``ucloudstorage help help`` for more information.
    """

    def __init__(self, cli):
        super(CLIHelp, self).__init__(
            cli, 'help', usage="""
Usage: %prog [main_options] help [command ...]

For help on [main_options] run %prog with no args.

Outputs the usage of each [command] given, or the general help and the
auth URL aliases accepted by -A if no [command] is given.""".strip())

    def __call__(self, args):
        options, args, context = self.parse_args_and_create_context(args)
        return cli_help(
            context, args, self.cli.option_parser, self.cli.commands,
            AUTH_URL_ALIASES)
