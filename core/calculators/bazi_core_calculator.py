#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
核心八字排盘计算逻辑

该模块仅负责基础排盘（四柱、十神、藏干、星运/自坐、旬空、纳音、神煞、五行统计、
日主强弱、干支关系），输入为已经过真太阳时校正的公历时间。

日主强弱为简化的生扶/克泄平衡评分，不是完整的格局与用神分析。
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List

from core.calculators.bazi_core import (
    DAY_MASTER_LABEL,
    get_element_relation,
    get_hidden_stem_items,
    get_main_star,
)
from core.calculators.bazi_core.element_relations import ELEMENT_RELATIONS, empty_element_counts
from core.calculators.bazi_logging import safe_log
from core.calculators.LunarConverter import PILLAR_KEYS, LunarConverter
from core.config.deities_config import DeitiesCalculator
from core.config.star_fortune_config import StarFortuneCalculator
from core.data.constants import NAYIN_MAP
from core.data.relations import (
    BRANCH_CHONG,
    BRANCH_HAI,
    BRANCH_LIUHE,
    BRANCH_PO,
    BRANCH_SANHE_GROUPS,
    BRANCH_SANHUI_GROUPS,
    BRANCH_XING,
    GROUP_ELEMENTS,
    STEM_HE,
)
from core.data.stems_branches import BRANCH_ELEMENTS, HIDDEN_STEMS, STEM_ELEMENTS

logger = logging.getLogger(__name__)

PILLAR_LABELS = {'year': '年柱', 'month': '月柱', 'day': '日柱', 'hour': '时柱'}

STRENGTH_THRESHOLD = 2
STRENGTH_METHOD = 'simplified_balance'
STRENGTH_NOTE = '简化平衡评分（生扶 vs 克泄），仅供参考，非完整格局/用神分析'

_star_fortune = StarFortuneCalculator()
_deities = DeitiesCalculator()


def build_pillar(pillar_type: str, stem: str, branch: str, day_stem: str,
                 nayin: str | None = None, xun: str | None = None, kongwang: str | None = None,
                 shensha: Iterable[str] = ()) -> Dict[str, Any]:
    """
    组装单柱详情

    十神一律以日干为参照；日柱天干即日主，标记为 '日主'。
    nayin/xun/kongwang 未提供时按干支查表。
    """
    if stem not in STEM_ELEMENTS or branch not in BRANCH_ELEMENTS:
        raise ValueError(f"无效的干支: {stem}{branch}")

    ganzhi = f"{stem}{branch}"
    return {
        'name': PILLAR_LABELS.get(pillar_type, pillar_type),
        'pillar_type': pillar_type,
        'ganzhi': ganzhi,
        'gan': {
            'char': stem,
            'wuxing': STEM_ELEMENTS[stem],
            'shishen': get_main_star(day_stem, stem, pillar_type),
        },
        'zhi': {
            'char': branch,
            'wuxing': BRANCH_ELEMENTS[branch],
            'hidden': get_hidden_stem_items(day_stem, branch),
        },
        'nayin': nayin if nayin is not None else NAYIN_MAP.get(ganzhi, ''),
        'xun': xun if xun is not None else _star_fortune.get_xun(ganzhi),
        'kongwang': kongwang if kongwang is not None else _star_fortune.get_kongwang(ganzhi),
        'changsheng': _star_fortune.get_stem_fortune(day_stem, branch),
        'self_sitting': _star_fortune.get_stem_fortune(stem, branch),
        'shensha': list(shensha),
    }


def count_elements(bazi_pillars: Dict[str, Dict[str, str]]) -> Dict[str, Dict[str, int]]:
    """五行统计：天干、地支、藏干分别计数，total 为三者之和"""
    stems = empty_element_counts()
    branches = empty_element_counts()
    hidden_stems = empty_element_counts()

    for pillar in bazi_pillars.values():
        stems[STEM_ELEMENTS[pillar['stem']]] += 1
        branches[BRANCH_ELEMENTS[pillar['branch']]] += 1
        for hidden in HIDDEN_STEMS.get(pillar['branch'], ()):
            hidden_stems[STEM_ELEMENTS[hidden]] += 1

    total = {element: stems[element] + branches[element] + hidden_stems[element] for element in stems}
    return {'stems': stems, 'branches': branches, 'hidden_stems': hidden_stems, 'total': total}


def assess_day_master_strength(day_stem: str, total_counts: Dict[str, int]) -> Dict[str, Any]:
    """
    日主强弱（简化）

    生扶 = 同我 + 生我，克泄 = 我生 + 克我，差值 >= 2 为强，<= -2 为弱，否则中和。
    """
    day_element = STEM_ELEMENTS[day_stem]
    relations = ELEMENT_RELATIONS[day_element]

    supportive = total_counts.get(day_element, 0) + total_counts.get(relations['produced_by'], 0)
    opposing = total_counts.get(relations['produces'], 0) + total_counts.get(relations['controlled_by'], 0)
    diff = supportive - opposing

    support_set = [day_element, relations['produced_by']]
    drain_set = [relations['produces'], relations['controls'], relations['controlled_by']]

    if diff >= STRENGTH_THRESHOLD:
        level, favorable, unfavorable = 'strong', drain_set, support_set
    elif diff <= -STRENGTH_THRESHOLD:
        level, favorable, unfavorable = 'weak', support_set, drain_set
    else:
        level, favorable, unfavorable = 'balanced', [], []

    return {
        'day_master': day_stem,
        'element': day_element,
        'level': level,
        'supportive_score': supportive,
        'opposing_score': opposing,
        'score_diff': diff,
        'favorable_elements': favorable,
        'unfavorable_elements': unfavorable,
        'useful_god': None,
        'pattern': None,
        'method': STRENGTH_METHOD,
        'is_provisional': True,
        'note': STRENGTH_NOTE,
    }


def build_ganzhi_relationships(bazi_pillars: Dict[str, Dict[str, str]]) -> Dict[str, Any]:
    """四柱之间的天干五合、地支六合/冲/刑/害/破、三合、三会"""
    pillars = [p for p in PILLAR_KEYS if p in bazi_pillars]
    stem_map = {p: bazi_pillars[p]['stem'] for p in pillars}
    branch_map = {p: bazi_pillars[p]['branch'] for p in pillars}

    stem_relations = {'he': []}
    branch_relations = {'liuhe': [], 'chong': [], 'xing': [], 'hai': [], 'po': [], 'sanhe': [], 'sanhui': []}

    for i in range(len(pillars)):
        for j in range(i + 1, len(pillars)):
            pillar_a, pillar_b = pillars[i], pillars[j]
            stem_a, stem_b = stem_map[pillar_a], stem_map[pillar_b]
            branch_a, branch_b = branch_map[pillar_a], branch_map[pillar_b]

            if STEM_HE.get(stem_a) == stem_b:
                stem_relations['he'].append({'pillars': [pillar_a, pillar_b], 'stems': [stem_a, stem_b]})

            entry = {'pillars': [pillar_a, pillar_b], 'branches': [branch_a, branch_b]}
            if BRANCH_LIUHE.get(branch_a) == branch_b:
                branch_relations['liuhe'].append(entry)
            if BRANCH_CHONG.get(branch_a) == branch_b:
                branch_relations['chong'].append(entry)
            if branch_b in BRANCH_XING.get(branch_a, ()) or branch_a in BRANCH_XING.get(branch_b, ()):
                branch_relations['xing'].append(entry)
            if branch_b in BRANCH_HAI.get(branch_a, ()):
                branch_relations['hai'].append(entry)
            if BRANCH_PO.get(branch_a) == branch_b:
                branch_relations['po'].append(entry)

    for key, groups in (('sanhe', BRANCH_SANHE_GROUPS), ('sanhui', BRANCH_SANHUI_GROUPS)):
        for group in groups:
            matched_pillars = [p for p in pillars if branch_map[p] in group]
            if {branch_map[p] for p in matched_pillars} == set(group):
                branch_relations[key].append({
                    'group': list(group),
                    'element': GROUP_ELEMENTS[group],
                    'pillars': matched_pillars,
                })

    return {'stem_relations': stem_relations, 'branch_relations': branch_relations}


class BaziCoreCalculator:
    """核心八字排盘计算器 - 仅包含纯计算逻辑"""

    def __init__(self, solar_date: str, solar_time: str, gender: str = 'male') -> None:
        if gender not in ('male', 'female'):
            raise ValueError(f"性别必须为 male 或 female: {gender}")
        self.solar_date = solar_date
        self.solar_time = solar_time
        self.gender = gender
        self.lunar_info: Dict[str, Any] | None = None
        self.bazi_pillars: Dict[str, Dict[str, str]] = {}
        self.shensha: Dict[str, List[str]] = {}
        self.last_result: Dict[str, Any] | None = None

    # === 公开方法 ==================================================================================

    def calculate(self) -> Dict[str, Any]:
        """执行八字排盘计算；输入不合法时抛 ValueError"""
        self._calculate_with_lunar_converter()
        self._calculate_deities()

        result = self._format_result()
        self.last_result = result
        return result

    @property
    def day_stem(self) -> str:
        return self.bazi_pillars['day']['stem']

    # === 内部计算步骤 ===============================================================================

    def _calculate_with_lunar_converter(self) -> None:
        self.lunar_info = LunarConverter.solar_to_lunar(self.solar_date, self.solar_time)
        self.bazi_pillars = self.lunar_info['bazi_pillars']
        logger.debug(
            "四柱: %s",
            ' '.join(f"{p['stem']}{p['branch']}" for p in self.bazi_pillars.values()),
        )

    def _calculate_deities(self) -> None:
        try:
            self.shensha = _deities.calculate_pillar_deities(self.bazi_pillars)
        except Exception as e:
            safe_log('warning', f"神煞计算失败，按空处理: {e}")
            self.shensha = {pillar_type: [] for pillar_type in self.bazi_pillars}

    def _build_relationships(self) -> Dict[str, Any]:
        try:
            return build_ganzhi_relationships(self.bazi_pillars)
        except Exception as e:
            safe_log('warning', f"干支关系计算失败，按空处理: {e}")
            return {'stem_relations': {'he': []}, 'branch_relations': {}}

    def _format_result(self) -> Dict[str, Any]:
        day_stem = self.day_stem
        pillars = [
            build_pillar(pillar_type, pillar['stem'], pillar['branch'], day_stem,
                         shensha=self.shensha.get(pillar_type, []))
            for pillar_type, pillar in self.bazi_pillars.items()
        ]
        element_counts = count_elements(self.bazi_pillars)

        return {
            'basic_info': {
                'solar_date': self.lunar_info['solar_date'],
                'solar_time': self.lunar_info['solar_time'],
                'gender': self.gender,
                'calendar_provider': self.lunar_info['provider'],
            },
            'lunar_date': self.lunar_info['lunar_date'],
            'leap_month': self.lunar_info['leap_month'],
            'month_day_count': self.lunar_info['month_day_count'],
            'bazi_pillars': self.bazi_pillars,
            'pillars': pillars,
            'day_master': day_stem,
            'day_master_element': STEM_ELEMENTS[day_stem],
            'day_master_label': DAY_MASTER_LABEL,
            'element_counts': element_counts,
            'day_master_strength': assess_day_master_strength(day_stem, element_counts['total']),
            'relationships': self._build_relationships(),
        }


def describe_element_relation(day_stem: str, element: str) -> str:
    """日主与某五行的关系（中文），如 生我 / 克我"""
    labels = {
        'same': '同我', 'me_producing': '我生', 'me_controlling': '我克',
        'producing_me': '生我', 'controlling_me': '克我',
    }
    return labels[get_element_relation(STEM_ELEMENTS[day_stem], element)]
