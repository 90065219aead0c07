#! /usr/bin/env python3

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import dataclasses
import sys
import time
import typing

_dataclass_args = {} \
    if sys.version_info < (3, 10) \
    else {'slots': True}


@dataclasses.dataclass(**_dataclass_args)
class Stopwatch:
    """Measures the wall-clock time spent inside a ``with`` block."""
    start: float = 0.0
    elapsed: float = 0.0

    def __enter__(self) -> 'Stopwatch':
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: typing.Any) -> None:
        self.elapsed = time.perf_counter() - self.start

    def format(self) -> str:
        if self.elapsed < 1e-3:
            return f'{self.elapsed * 1e6:.0f} us'
        if self.elapsed < 1:
            return f'{self.elapsed * 1e3:.2f} ms'
        return f'{self.elapsed:.3f} s'
