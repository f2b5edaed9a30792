# -*- coding: utf-8 -*-

from typing import Dict, List

# 天乙贵人：甲戊庚牛羊，乙己鼠猴乡，丙丁猪鸡位，壬癸兔蛇藏，六辛逢马虎
TIANYI_GUIREN = {
    '甲': ('丑', '未'), '戊': ('丑', '未'), '庚': ('丑', '未'),
    '乙': ('子', '申'), '己': ('子', '申'),
    '丙': ('亥', '酉'), '丁': ('亥', '酉'),
    '壬': ('卯', '巳'), '癸': ('卯', '巳'),
    '辛': ('寅', '午'),
}

WENCHANG = {
    '甲': '巳', '乙': '午', '丙': '申', '丁': '酉', '戊': '申',
    '己': '酉', '庚': '亥', '辛': '子', '壬': '寅', '癸': '卯',
}

LUSHEN = {
    '甲': '寅', '乙': '卯', '丙': '巳', '丁': '午', '戊': '巳',
    '己': '午', '庚': '申', '辛': '酉', '壬': '亥', '癸': '子',
}

YANGREN = {
    '甲': '卯', '乙': '辰', '丙': '午', '丁': '未', '戊': '午',
    '己': '未', '庚': '酉', '辛': '戌', '壬': '子', '癸': '丑',
}

# 三合局为键：驿马、桃花（咸池）、华盖
_SANHE_KEY = {
    '申': '申子辰', '子': '申子辰', '辰': '申子辰',
    '寅': '寅午戌', '午': '寅午戌', '戌': '寅午戌',
    '巳': '巳酉丑', '酉': '巳酉丑', '丑': '巳酉丑',
    '亥': '亥卯未', '卯': '亥卯未', '未': '亥卯未',
}

YIMA = {'申子辰': '寅', '寅午戌': '申', '巳酉丑': '亥', '亥卯未': '巳'}
TAOHUA = {'申子辰': '酉', '寅午戌': '卯', '巳酉丑': '午', '亥卯未': '子'}
HUAGAI = {'申子辰': '辰', '寅午戌': '戌', '巳酉丑': '丑', '亥卯未': '未'}


class DeitiesCalculator:
    """神煞计算器"""

    def get_stem_deities(self, day_stem: str, target_branch: str) -> List[str]:
        """以日干查：天乙贵人、文昌贵人、禄神、羊刃"""
        deities = []
        if target_branch in TIANYI_GUIREN.get(day_stem, ()):
            deities.append('天乙贵人')
        if WENCHANG.get(day_stem) == target_branch:
            deities.append('文昌贵人')
        if LUSHEN.get(day_stem) == target_branch:
            deities.append('禄神')
        if YANGREN.get(day_stem) == target_branch:
            deities.append('羊刃')
        return deities

    def get_branch_deities(self, base_branches: List[str], target_branch: str) -> List[str]:
        """以日支、年支查：驿马、桃花、华盖"""
        deities = []
        for name, table in (('驿马', YIMA), ('桃花', TAOHUA), ('华盖', HUAGAI)):
            for base in base_branches:
                key = _SANHE_KEY.get(base)
                if key and table[key] == target_branch:
                    deities.append(name)
                    break
        return deities

    def get_shensha(self, day_stem: str, day_branch: str, year_branch: str, target_branch: str) -> List[str]:
        """某一地支上的全部神煞，顺序固定"""
        return (
            self.get_stem_deities(day_stem, target_branch)
            + self.get_branch_deities([day_branch, year_branch], target_branch)
        )

    def calculate_pillar_deities(self, bazi_pillars: Dict[str, Dict[str, str]]) -> Dict[str, List[str]]:
        day_stem = bazi_pillars['day']['stem']
        day_branch = bazi_pillars['day']['branch']
        year_branch = bazi_pillars['year']['branch']
        return {
            pillar_type: self.get_shensha(day_stem, day_branch, year_branch, pillar['branch'])
            for pillar_type, pillar in bazi_pillars.items()
        }
