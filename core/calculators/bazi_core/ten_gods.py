#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
十神计算模块

十神矩阵在导入时由五行生克与阴阳一次性生成，日干 × 目标干 直接查表。
"""

from types import MappingProxyType
from typing import Dict, List

from core.data.stems_branches import HEAVENLY_STEMS, STEM_ELEMENTS, STEM_YINYANG, HIDDEN_STEMS

from .element_relations import get_element_relation

DAY_MASTER_LABEL = '日主'

# 关系类型 -> (同阴阳, 异阴阳)
_RELATION_GODS = {
    'same': ('比肩', '劫财'),
    'me_producing': ('食神', '伤官'),
    'me_controlling': ('偏财', '正财'),
    'controlling_me': ('七杀', '正官'),
    'producing_me': ('偏印', '正印'),
}


def _derive_ten_god(day_stem: str, target_stem: str) -> str:
    relation_type = get_element_relation(STEM_ELEMENTS[day_stem], STEM_ELEMENTS[target_stem])
    same_yinyang, diff_yinyang = _RELATION_GODS[relation_type]
    return same_yinyang if STEM_YINYANG[day_stem] == STEM_YINYANG[target_stem] else diff_yinyang


TEN_GOD_MATRIX = MappingProxyType({
    day_stem: MappingProxyType({
        target_stem: _derive_ten_god(day_stem, target_stem) for target_stem in HEAVENLY_STEMS
    })
    for day_stem in HEAVENLY_STEMS
})


def get_ten_god(day_stem: str, target_stem: str) -> str:
    """
    日干对目标天干的十神

    Raises:
        ValueError: 天干不合法
    """
    try:
        return TEN_GOD_MATRIX[day_stem][target_stem]
    except KeyError:
        raise ValueError(f"无效的天干: {day_stem}/{target_stem}")


def get_main_star(day_stem: str, target_stem: str, pillar_type: str) -> str:
    """
    计算主星（十神）

    Args:
        day_stem: 日干
        target_stem: 目标天干
        pillar_type: 柱类型（year/month/day/hour/hidden/dayun）

    Returns:
        str: 十神名称；日柱天干即日主本身，返回 '日主'
    """
    if pillar_type == 'day':
        return DAY_MASTER_LABEL
    return get_ten_god(day_stem, target_stem)


def get_hidden_stem_items(day_stem: str, branch: str) -> List[Dict[str, str]]:
    return [
        {'char': stem, 'wuxing': STEM_ELEMENTS[stem], 'shishen': get_ten_god(day_stem, stem)}
        for stem in HIDDEN_STEMS.get(branch, ())
    ]
