# Copyright 2025 Stochnoise Development Team
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Base exceptions raised by stochnoise."""


class StochNoiseError(Exception):
    """Any error raised by stochnoise."""

    pass


class StochNoiseValueError(ValueError, StochNoiseError):
    """A ValueError raised by stochnoise.

    Usage:
        Invalid user input is reported with subclasses of this class, so
        that it can be caught either as a ValueError or as a
        `StochNoiseError`.
    """

    pass
