# -*- coding: utf-8 -*-

from ..data.constants import CHANGSHENG_STAGES, CHANGSHENG_ORIGIN
from ..data.stems_branches import (
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    STEM_YINYANG,
    get_jiazi_index,
)


class StarFortuneCalculator:
    """星运（十二长生）与旬空计算器"""

    def get_stem_fortune(self, stem, branch):
        """
        天干在地支上的十二长生状态

        阳干从长生地顺数，阴干从长生地逆数。
        """
        origin = CHANGSHENG_ORIGIN.get(stem)
        if origin is None or branch not in EARTHLY_BRANCHES:
            return ''

        origin_index = EARTHLY_BRANCHES.index(origin)
        branch_index = EARTHLY_BRANCHES.index(branch)
        if STEM_YINYANG[stem] == '阳':
            offset = (branch_index - origin_index) % 12
        else:
            offset = (origin_index - branch_index) % 12
        return CHANGSHENG_STAGES[offset]

    def get_xun(self, ganzhi):
        """所在旬，如 甲子旬"""
        index = get_jiazi_index(ganzhi[0], ganzhi[1])
        head = index - index % 10
        return f"{HEAVENLY_STEMS[0]}{EARTHLY_BRANCHES[head % 12]}旬"

    def get_kongwang(self, ganzhi):
        """旬空：本旬没有配到天干的两个地支"""
        index = get_jiazi_index(ganzhi[0], ganzhi[1])
        head_branch = (index - index % 10) % 12
        return EARTHLY_BRANCHES[(head_branch + 10) % 12] + EARTHLY_BRANCHES[(head_branch + 11) % 12]
