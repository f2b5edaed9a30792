#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
五行生克关系模块
"""

from types import MappingProxyType
from typing import Dict, Literal

from core.data.stems_branches import FIVE_ELEMENTS

# 五行关系类型
RelationType = Literal['same', 'me_producing', 'me_controlling', 'producing_me', 'controlling_me']

ELEMENT_RELATIONS = MappingProxyType({
    '木': MappingProxyType({'produces': '火', 'controls': '土', 'produced_by': '水', 'controlled_by': '金'}),
    '火': MappingProxyType({'produces': '土', 'controls': '金', 'produced_by': '木', 'controlled_by': '水'}),
    '土': MappingProxyType({'produces': '金', 'controls': '水', 'produced_by': '火', 'controlled_by': '木'}),
    '金': MappingProxyType({'produces': '水', 'controls': '木', 'produced_by': '土', 'controlled_by': '火'}),
    '水': MappingProxyType({'produces': '木', 'controls': '火', 'produced_by': '金', 'controlled_by': '土'}),
})


def get_element_relation(day_element: str, target_element: str) -> RelationType:
    """
    判断五行生克关系（以日主五行为我）

    Returns:
        'same' 同我 / 'me_producing' 我生 / 'me_controlling' 我克 /
        'producing_me' 生我 / 'controlling_me' 克我

    Raises:
        ValueError: 五行名称不合法
    """
    if day_element not in ELEMENT_RELATIONS or target_element not in ELEMENT_RELATIONS:
        raise ValueError(f"无效的五行: {day_element}/{target_element}")

    if day_element == target_element:
        return 'same'

    relations = ELEMENT_RELATIONS[day_element]
    if target_element == relations['produces']:
        return 'me_producing'
    if target_element == relations['controls']:
        return 'me_controlling'
    if target_element == relations['produced_by']:
        return 'producing_me'
    return 'controlling_me'



def empty_element_counts() -> Dict[str, int]:
    return {element: 0 for element in FIVE_ELEMENTS}
