"""
Contains the tools for the ``ucloudstorage`` command line.

For convenience, the following names are imported from submodules:

=============  ==========================================================
CLI            :py:class:`ucloudstorage.cli.cli.CLI`
CLICommand     :py:class:`ucloudstorage.cli.command.CLICommand`
CLIContext     :py:class:`ucloudstorage.cli.context.CLIContext`
IOManager      :py:class:`ucloudstorage.cli.iomanager.IOManager`
OptionParser   :py:class:`ucloudstorage.cli.optionparser.OptionParser`
ReturnCode     :py:class:`ucloudstorage.cli.command.ReturnCode`
=============  ==========================================================

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
# flake8: noqa
from ucloudstorage.cli.cli import CLI
from ucloudstorage.cli.command import CLICommand, ReturnCode
from ucloudstorage.cli.context import CLIContext
from ucloudstorage.cli.iomanager import IOManager
from ucloudstorage.cli.optionparser import OptionParser
