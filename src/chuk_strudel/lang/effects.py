"""Effect parameters - distortion, bit crushing, reverb and delay."""

from __future__ import annotations

from chuk_strudel.lang.dsl import declare_param

distort = declare_param("distort", "distort", aliases=("dist",))
crush = declare_param("crush", "crush")
coarse = declare_param("coarse", "coarse")

room = declare_param("room", "room")
roomsize = declare_param("roomsize", "room_size", aliases=("rsize", "sz", "size"))

delay = declare_param("delay", "delay")
delaytime = declare_param("delaytime", "delay_time")
delayfeedback = declare_param("delayfeedback", "delay_feedback", aliases=("delayfb", "dfb"))
