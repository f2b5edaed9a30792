#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
天干地支基础数据

天干、地支、五行、阴阳、藏干、六十甲子。所有表在导入时构建，之后只读。
"""

from types import MappingProxyType

HEAVENLY_STEMS = ('甲', '乙', '丙', '丁', '戊', '己', '庚', '辛', '壬', '癸')
EARTHLY_BRANCHES = ('子', '丑', '寅', '卯', '辰', '巳', '午', '未', '申', '酉', '戌', '亥')

FIVE_ELEMENTS = ('木', '火', '土', '金', '水')

STEM_ELEMENTS = MappingProxyType({
    '甲': '木', '乙': '木',
    '丙': '火', '丁': '火',
    '戊': '土', '己': '土',
    '庚': '金', '辛': '金',
    '壬': '水', '癸': '水',
})

BRANCH_ELEMENTS = MappingProxyType({
    '子': '水', '丑': '土', '寅': '木', '卯': '木',
    '辰': '土', '巳': '火', '午': '火', '未': '土',
    '申': '金', '酉': '金', '戌': '土', '亥': '水',
})

STEM_YINYANG = MappingProxyType({
    stem: ('阳' if i % 2 == 0 else '阴') for i, stem in enumerate(HEAVENLY_STEMS)
})

# 地支藏干（本气在前）
HIDDEN_STEMS = MappingProxyType({
    '子': ('癸',),
    '丑': ('己', '癸', '辛'),
    '寅': ('甲', '丙', '戊'),
    '卯': ('乙',),
    '辰': ('戊', '乙', '癸'),
    '巳': ('丙', '戊', '庚'),
    '午': ('丁', '己'),
    '未': ('己', '丁', '乙'),
    '申': ('庚', '壬', '戊'),
    '酉': ('辛',),
    '戌': ('戊', '辛', '丁'),
    '亥': ('壬', '甲'),
})

# 六十甲子
SIXTY_JIAZI = tuple(
    HEAVENLY_STEMS[i % 10] + EARTHLY_BRANCHES[i % 12] for i in range(60)
)


def is_valid_stem(stem: str) -> bool:
    return stem in STEM_ELEMENTS


def get_jiazi_index(stem: str, branch: str) -> int:
    """
    获取干支在六十甲子中的序号（0-59）

    Raises:
        ValueError: 干支不合法或阴阳不配（如 甲丑）
    """
    ganzhi = f"{stem}{branch}"
    try:
        return SIXTY_JIAZI.index(ganzhi)
    except ValueError:
        raise ValueError(f"无效的干支组合: {ganzhi}")
