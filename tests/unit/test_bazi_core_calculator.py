#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字核心计算测试
"""

import pytest

from core.calculators.bazi_core import DAY_MASTER_LABEL
from core.calculators.bazi_core_calculator import (
    BaziCoreCalculator,
    assess_day_master_strength,
    build_ganzhi_relationships,
    build_pillar,
    count_elements,
    describe_element_relation,
)
from core.data.stems_branches import HIDDEN_STEMS


SAMPLE_PILLARS = {
    'year': {'stem': '己', 'branch': '巳'},
    'month': {'stem': '丙', 'branch': '子'},
    'day': {'stem': '丙', 'branch': '寅'},
    'hour': {'stem': '甲', 'branch': '午'},
}


class TestBuildPillar:
    """单柱组装"""

    def test_day_pillar_stem_is_day_master(self):
        pillar = build_pillar('day', '丙', '寅', '丙')
        assert pillar['gan']['shishen'] == DAY_MASTER_LABEL
        assert pillar['name'] == '日柱'

    def test_other_pillar_ten_god(self):
        pillar = build_pillar('hour', '甲', '午', '丙')
        assert pillar['gan']['shishen'] == '偏印'
        assert pillar['ganzhi'] == '甲午'
        assert pillar['nayin'] == '沙中金'

    def test_hidden_stems_match_table(self):
        for branch, stems in HIDDEN_STEMS.items():
            stem = '甲' if branch in '子寅辰午申戌' else '乙'
            pillar = build_pillar('year', stem, branch, '丙')
            assert [item['char'] for item in pillar['zhi']['hidden']] == list(stems)

    def test_lookup_fields(self):
        pillar = build_pillar('year', '己', '巳', '丙')
        assert pillar['xun'] == '甲子旬'
        assert pillar['kongwang'] == '戌亥'
        assert pillar['changsheng'] == '临官'
        assert pillar['self_sitting'] == '帝旺'

    def test_explicit_values_override_lookup(self):
        pillar = build_pillar('year', '己', '巳', '丙', nayin='X', xun='Y', kongwang='Z', shensha=['禄神'])
        assert (pillar['nayin'], pillar['xun'], pillar['kongwang']) == ('X', 'Y', 'Z')
        assert pillar['shensha'] == ['禄神']

    def test_invalid_ganzhi(self):
        with pytest.raises(ValueError):
            build_pillar('year', 'X', '巳', '丙')


class TestElementCounts:

    def test_counts(self):
        counts = count_elements(SAMPLE_PILLARS)
        assert counts['stems'] == {'木': 1, '火': 2, '土': 1, '金': 0, '水': 0}
        assert counts['branches'] == {'木': 1, '火': 2, '土': 0, '金': 0, '水': 1}
        assert sum(counts['hidden_stems'].values()) == sum(len(HIDDEN_STEMS[p['branch']]) for p in SAMPLE_PILLARS.values())
        for element, total in counts['total'].items():
            assert total == counts['stems'][element] + counts['branches'][element] + counts['hidden_stems'][element]


class TestDayMasterStrength:
    """日主强弱（简化评分）"""

    def test_strong_wood(self):
        result = assess_day_master_strength('甲', {'木': 4, '火': 0, '土': 0, '金': 0, '水': 0})
        assert result['level'] == 'strong'
        assert result['supportive_score'] == 4
        assert result['favorable_elements'] == ['火', '土', '金']
        assert result['unfavorable_elements'] == ['木', '水']
        assert result['is_provisional'] is True
        assert result['useful_god'] is None

    def test_weak_wood(self):
        result = assess_day_master_strength('甲', {'木': 0, '火': 2, '土': 1, '金': 1, '水': 0})
        assert result['level'] == 'weak'
        assert result['favorable_elements'] == ['木', '水']

    def test_balanced_has_no_preferences(self):
        result = assess_day_master_strength('甲', {'木': 1, '火': 1, '土': 0, '金': 0, '水': 0})
        assert result['level'] == 'balanced'
        assert result['favorable_elements'] == []
        assert result['unfavorable_elements'] == []

    def test_threshold_is_two(self):
        assert assess_day_master_strength('甲', {'木': 2})['level'] == 'strong'
        assert assess_day_master_strength('甲', {'火': 2})['level'] == 'weak'


class TestRelationships:

    def test_clash_and_harmony(self):
        pillars = {
            'year': {'stem': '甲', 'branch': '子'},
            'month': {'stem': '己', 'branch': '午'},
            'day': {'stem': '丙', 'branch': '丑'},
            'hour': {'stem': '辛', 'branch': '寅'},
        }
        relations = build_ganzhi_relationships(pillars)
        assert {'pillars': ['year', 'month'], 'stems': ['甲', '己']} in relations['stem_relations']['he']
        assert {'pillars': ['year', 'month'], 'branches': ['子', '午']} in relations['branch_relations']['chong']
        assert {'pillars': ['year', 'day'], 'branches': ['子', '丑']} in relations['branch_relations']['liuhe']

    def test_sanhe(self):
        pillars = {
            'year': {'stem': '甲', 'branch': '申'},
            'month': {'stem': '丙', 'branch': '子'},
            'day': {'stem': '戊', 'branch': '辰'},
            'hour': {'stem': '庚', 'branch': '午'},
        }
        sanhe = build_ganzhi_relationships(pillars)['branch_relations']['sanhe']
        assert len(sanhe) == 1
        assert sanhe[0]['element'] == '水'
        assert sanhe[0]['pillars'] == ['year', 'month', 'day']


class TestBaziCoreCalculator:
    """完整排盘"""

    def test_calculate(self):
        result = BaziCoreCalculator('1990-01-01', '12:00', 'male').calculate()
        assert result['basic_info']['calendar_provider'] == 'precise'
        assert [p['pillar_type'] for p in result['pillars']] == ['year', 'month', 'day', 'hour']
        assert result['pillars'][0]['ganzhi'] == '己巳'
        assert result['pillars'][1]['ganzhi'] == '丙子'
        assert result['pillars'][2]['gan']['shishen'] == DAY_MASTER_LABEL
        assert result['day_master'] == result['pillars'][2]['gan']['char']
        assert result['day_master_strength']['method'] == 'simplified_balance'
        assert set(result['relationships']) == {'stem_relations', 'branch_relations'}

    def test_invalid_gender(self):
        with pytest.raises(ValueError):
            BaziCoreCalculator('1990-01-01', '12:00', 'unknown')

    def test_invalid_date(self):
        with pytest.raises(ValueError):
            BaziCoreCalculator('1990-02-30', '12:00', 'male').calculate()

    def test_shensha_failure_degrades(self, monkeypatch):
        from core.calculators import bazi_core_calculator

        def broken(*args, **kwargs):
            raise RuntimeError('boom')

        monkeypatch.setattr(bazi_core_calculator._deities, 'calculate_pillar_deities', broken)
        result = BaziCoreCalculator('1990-01-01', '12:00', 'male').calculate()
        assert all(p['shensha'] == [] for p in result['pillars'])

    def test_deterministic(self):
        first = BaziCoreCalculator('1985-05-20', '08:30', 'female').calculate()
        second = BaziCoreCalculator('1985-05-20', '08:30', 'female').calculate()
        assert first == second


class TestDescribeElementRelation:

    def test_labels(self):
        assert describe_element_relation('甲', '水') == '生我'
        assert describe_element_relation('甲', '金') == '克我'
        assert describe_element_relation('甲', '木') == '同我'
