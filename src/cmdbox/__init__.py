# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""cmdbox - a dynamic command registry for uploaded JS and Python scripts."""

__version__ = "0.1.0"
