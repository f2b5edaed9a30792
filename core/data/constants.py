#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排盘常量表

纳音、十二长生、时辰、节令、紫微四化、煞星、宫位名称。
"""

from types import MappingProxyType

from core.data.stems_branches import SIXTY_JIAZI

# 纳音（六十甲子两两一组）
_NAYIN_NAMES = (
    '海中金', '炉中火', '大林木', '路旁土', '剑锋金',
    '山头火', '涧下水', '城头土', '白蜡金', '杨柳木',
    '泉中水', '屋上土', '霹雳火', '松柏木', '长流水',
    '沙中金', '山下火', '平地木', '壁上土', '金箔金',
    '覆灯火', '天河水', '大驿土', '钗钏金', '桑柘木',
    '大溪水', '沙中土', '天上火', '石榴木', '大海水',
)

NAYIN_MAP = MappingProxyType({
    ganzhi: _NAYIN_NAMES[i // 2] for i, ganzhi in enumerate(SIXTY_JIAZI)
})

# 十二长生
CHANGSHENG_STAGES = ('长生', '沐浴', '冠带', '临官', '帝旺', '衰', '病', '死', '墓', '绝', '胎', '养')

# 十干长生起点：阳干顺行，阴干逆行
CHANGSHENG_ORIGIN = MappingProxyType({
    '甲': '亥', '丙': '寅', '戊': '寅', '庚': '巳', '壬': '申',
    '乙': '午', '丁': '酉', '己': '酉', '辛': '子', '癸': '卯',
})

# 时辰标签
TIME_BRANCH_LABELS = (
    '子 (Zi)', '丑 (Chou)', '寅 (Yin)', '卯 (Mao)', '辰 (Chen)', '巳 (Si)',
    '午 (Wu)', '未 (Wei)', '申 (Shen)', '酉 (You)', '戌 (Xu)', '亥 (Hai)',
)

# 十二节（月令分界），不含中气
JIE_NAMES = frozenset([
    '立春', '惊蛰', '清明', '立夏', '芒种', '小暑',
    '立秋', '白露', '寒露', '立冬', '大雪', '小寒',
])

# 紫微斗数十干四化：禄、权、科、忌
SI_HUA_MAP = MappingProxyType({
    '甲': ('廉贞', '破军', '武曲', '太阳'),
    '乙': ('天机', '天梁', '紫微', '太阴'),
    '丙': ('天同', '天机', '文昌', '廉贞'),
    '丁': ('太阴', '天同', '天机', '巨门'),
    '戊': ('贪狼', '太阴', '右弼', '天机'),
    '己': ('武曲', '贪狼', '天梁', '文曲'),
    '庚': ('太阳', '武曲', '太阴', '天同'),
    '辛': ('巨门', '太阳', '文曲', '文昌'),
    '壬': ('天梁', '紫微', '左辅', '武曲'),
    '癸': ('破军', '巨门', '太阴', '贪狼'),
})

SI_HUA_SLOTS = ('lu', 'quan', 'ke', 'ji')
SI_HUA_LABELS = MappingProxyType({'lu': '禄', 'quan': '权', 'ke': '科', 'ji': '忌'})

# 六煞
TOUGH_STARS = frozenset(['擎羊', '陀罗', '火星', '铃星', '地空', '地劫'])

# 十二宫基础名称（从命宫起逆排）
PALACE_NAMES = (
    '命宫', '兄弟', '夫妻', '子女', '财帛', '疾厄',
    '迁移', '仆役', '官禄', '田宅', '福德', '父母',
)

BORROW_RULE = '借对宫主星'

GENDER_LABELS = MappingProxyType({
    'male': {'gender': 'Male', 'original': '乾造', 'iztro': '男', 'display': '男 (Male)'},
    'female': {'gender': 'Female', 'original': '坤造', 'iztro': '女', 'display': '女 (Female)'},
})

# 排盘规则版本，规则表变更时递增
RULE_VERSION = '1.0.0'
