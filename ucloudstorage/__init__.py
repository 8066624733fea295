"""
Client for KT ucloud storage and other Swift-compatible object storage
services that use the v1 auth protocol with expiring tokens.

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

#: Version str for ucloudstorage: "major.minor".
#: If the second number is even, it's an official release.
#: If the second number is odd, it's a development release.
VERSION = '1.0'
__version__ = VERSION
