"""Sample playback parameters - begin, end, speed, loop, cut."""

from __future__ import annotations

from typing import Any

from chuk_strudel.lang.dsl import declare_param
from chuk_strudel.models.voice import as_int, is_truthy


def _as_flag(value: Any) -> bool | None:
    return None if value is None else is_truthy(value)


begin = declare_param("begin", "begin")
end = declare_param("end", "end")
speed = declare_param("speed", "speed")
loop = declare_param("loop", "loop", coerce=_as_flag)
cut = declare_param("cut", "cut", coerce=as_int)
