#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
干支关系表：天干五合，地支六合、六冲、三刑、六害、六破、三合、三会
"""

from types import MappingProxyType


def _symmetric(pairs):
    table = {}
    for a, b in pairs:
        table[a] = b
        table[b] = a
    return MappingProxyType(table)


STEM_HE = _symmetric([('甲', '己'), ('乙', '庚'), ('丙', '辛'), ('丁', '壬'), ('戊', '癸')])

BRANCH_LIUHE = _symmetric([('子', '丑'), ('寅', '亥'), ('卯', '戌'), ('辰', '酉'), ('巳', '申'), ('午', '未')])

BRANCH_CHONG = _symmetric([('子', '午'), ('丑', '未'), ('寅', '申'), ('卯', '酉'), ('辰', '戌'), ('巳', '亥')])

BRANCH_PO = _symmetric([('子', '酉'), ('卯', '午'), ('辰', '丑'), ('未', '戌'), ('寅', '亥'), ('巳', '申')])

# 刑是有方向的：寅刑巳、巳刑申、申刑寅；辰午酉亥自刑
BRANCH_XING = MappingProxyType({
    '寅': ('巳',), '巳': ('申',), '申': ('寅',),
    '丑': ('戌',), '戌': ('未',), '未': ('丑',),
    '子': ('卯',), '卯': ('子',),
    '辰': ('辰',), '午': ('午',), '酉': ('酉',), '亥': ('亥',),
})

BRANCH_HAI = MappingProxyType({
    '子': ('未',), '未': ('子',),
    '丑': ('午',), '午': ('丑',),
    '寅': ('巳',), '巳': ('寅',),
    '卯': ('辰',), '辰': ('卯',),
    '申': ('亥',), '亥': ('申',),
    '酉': ('戌',), '戌': ('酉',),
})

BRANCH_SANHE_GROUPS = (
    ('申', '子', '辰'),
    ('亥', '卯', '未'),
    ('寅', '午', '戌'),
    ('巳', '酉', '丑'),
)

BRANCH_SANHUI_GROUPS = (
    ('寅', '卯', '辰'),
    ('巳', '午', '未'),
    ('申', '酉', '戌'),
    ('亥', '子', '丑'),
)

GROUP_ELEMENTS = MappingProxyType({
    ('申', '子', '辰'): '水', ('亥', '卯', '未'): '木',
    ('寅', '午', '戌'): '火', ('巳', '酉', '丑'): '金',
    ('寅', '卯', '辰'): '木', ('巳', '午', '未'): '火',
    ('申', '酉', '戌'): '金', ('亥', '子', '丑'): '水',
})
