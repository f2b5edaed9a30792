#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
大运排列

两种起运策略：
- ChildLimitStrategy：tyme4py 童限（真太阳时），首选
- LunarYunStrategy：lunar_python EightChar.getYun，回退

首选策略抛异常或没有给出大运时回退，并记录 warning。
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from lunar_python import Solar
from tyme4py.enums import Gender
from tyme4py.eightchar import ChildLimit
from tyme4py.solar import SolarTime

from core.calculators.bazi_core import get_hidden_stem_items, get_ten_god
from core.calculators.bazi_logging import safe_log
from core.data.constants import NAYIN_MAP
from core.data.stems_branches import BRANCH_ELEMENTS, STEM_ELEMENTS

MAX_DECADES = 10
MAX_START_AGE = 110


def _decade(start_age, end_age, start_year, end_year, ganzhi) -> Dict[str, Any]:
    return {
        'start_age': int(start_age),
        'end_age': int(end_age),
        'start_year': int(start_year),
        'end_year': int(end_year),
        'stem': ganzhi[0],
        'branch': ganzhi[1],
    }


class DecadeLuckStrategy(ABC):
    """起运/大运策略接口"""

    name = ''

    @abstractmethod
    def compute(self, birth_time: datetime, gender: str,
                max_decades: int = MAX_DECADES, max_start_age: int = MAX_START_AGE) -> Dict[str, Any]:
        """
        Returns:
            {'start_age': int, 'start_date': 'YYYY-MM-DD', 'decades': [...]}
        """


class ChildLimitStrategy(DecadeLuckStrategy):
    """tyme4py 童限起运"""

    name = 'child_limit'

    @staticmethod
    def _start_year(fortune) -> int:
        # tyme4py 1.3 起改名为 get_start_sixty_cycle_year
        for attr in ('get_start_sixty_cycle_year', 'get_start_lunar_year'):
            getter = getattr(fortune, attr, None)
            if callable(getter):
                return getter().get_year()
        raise AttributeError('DecadeFortune 缺少起始年份接口')

    @staticmethod
    def _end_year(fortune) -> int:
        for attr in ('get_end_sixty_cycle_year', 'get_end_lunar_year'):
            getter = getattr(fortune, attr, None)
            if callable(getter):
                return getter().get_year()
        raise AttributeError('DecadeFortune 缺少结束年份接口')

    def compute(self, birth_time, gender, max_decades=MAX_DECADES, max_start_age=MAX_START_AGE):
        solar_time = SolarTime.from_ymd_hms(
            birth_time.year, birth_time.month, birth_time.day,
            birth_time.hour, birth_time.minute, birth_time.second,
        )
        child_limit = ChildLimit(solar_time, Gender.MAN if gender == 'male' else Gender.WOMAN)
        first = child_limit.get_start_decade_fortune()
        end_time = child_limit.get_end_time()

        decades = []
        for i in range(max_decades):
            fortune = first.next(i)
            start_age = fortune.get_start_age()
            if start_age > max_start_age:
                break
            cycle = fortune.get_sixty_cycle()
            ganzhi = cycle.get_heaven_stem().get_name() + cycle.get_earth_branch().get_name()
            decades.append(_decade(start_age, fortune.get_end_age(),
                                   self._start_year(fortune), self._end_year(fortune), ganzhi))

        return {
            'start_age': decades[0]['start_age'] if decades else first.get_start_age(),
            'start_date': f"{end_time.get_year():04d}-{end_time.get_month():02d}-{end_time.get_day():02d}",
            'decades': decades,
        }


class LunarYunStrategy(DecadeLuckStrategy):
    """lunar_python 起运（EightChar.getYun）"""

    name = 'lunar_yun'

    def compute(self, birth_time, gender, max_decades=MAX_DECADES, max_start_age=MAX_START_AGE):
        solar = Solar.fromYmdHms(birth_time.year, birth_time.month, birth_time.day,
                                 birth_time.hour, birth_time.minute, birth_time.second)
        # 流派 2 按分钟计起运，与 tyme4py 童限一致
        yun = solar.getLunar().getEightChar().getYun(1 if gender == 'male' else 0, 2)

        decades = []
        # 第 0 步为起运前的童限，没有干支
        for da_yun in yun.getDaYun(max_decades + 1):
            ganzhi = da_yun.getGanZhi()
            if not ganzhi:
                continue
            if da_yun.getStartAge() > max_start_age or len(decades) >= max_decades:
                break
            decades.append(_decade(da_yun.getStartAge(), da_yun.getEndAge(),
                                   da_yun.getStartYear(), da_yun.getEndYear(), ganzhi))

        start_solar = yun.getStartSolar()
        return {
            'start_age': decades[0]['start_age'] if decades else None,
            'start_date': f"{start_solar.getYear():04d}-{start_solar.getMonth():02d}-{start_solar.getDay():02d}",
            'decades': decades,
        }


DEFAULT_STRATEGIES = (ChildLimitStrategy(), LunarYunStrategy())


def enrich_decade(step: int, decade: Dict[str, Any], day_stem: str) -> Dict[str, Any]:
    """为大运补充十神与藏干，规则与四柱一致"""
    stem, branch = decade['stem'], decade['branch']
    ganzhi = f"{stem}{branch}"
    return {
        'step': step,
        'ganzhi': ganzhi,
        'start_age': decade['start_age'],
        'end_age': decade['end_age'],
        'start_year': decade['start_year'],
        'end_year': decade['end_year'],
        'gan': {'char': stem, 'wuxing': STEM_ELEMENTS[stem], 'shishen': get_ten_god(day_stem, stem)},
        'zhi': {'char': branch, 'wuxing': BRANCH_ELEMENTS[branch], 'hidden': get_hidden_stem_items(day_stem, branch)},
        'nayin': NAYIN_MAP.get(ganzhi, ''),
    }


def calculate_dayun(birth_time: datetime, gender: str, day_stem: str,
                    strategies: Optional[Sequence[DecadeLuckStrategy]] = None,
                    max_decades: int = MAX_DECADES, max_start_age: int = MAX_START_AGE) -> Dict[str, Any]:
    """
    计算起运与大运序列

    Args:
        birth_time: 真太阳时校正后的出生时间
        gender: male/female
        day_stem: 日干（十神参照）
        strategies: 策略顺序，默认 童限 -> lunar 起运

    Returns:
        {'start_age', 'start_date', 'strategy', 'is_fallback', 'da_yun': [...]}

    Raises:
        ValueError: 所有策略均失败
    """
    strategies = strategies or DEFAULT_STRATEGIES
    errors: List[str] = []

    for position, strategy in enumerate(strategies):
        try:
            raw = strategy.compute(birth_time, gender, max_decades, max_start_age)
        except Exception as e:
            errors.append(f"{strategy.name}: {e}")
            safe_log('warning', f"大运策略 {strategy.name} 失败: {e}")
            continue
        if not raw.get('decades'):
            errors.append(f"{strategy.name}: 无大运")
            safe_log('warning', f"大运策略 {strategy.name} 未返回大运")
            continue
        if position > 0:
            safe_log('warning', f"大运使用回退策略 {strategy.name}")

        da_yun = [enrich_decade(step, decade, day_stem) for step, decade in enumerate(raw['decades'], start=1)]
        return {
            'start_age': da_yun[0]['start_age'],
            'start_date': raw.get('start_date'),
            'strategy': strategy.name,
            'is_fallback': position > 0,
            'da_yun': da_yun,
        }

    raise ValueError(f"大运计算失败: {'; '.join(errors)}")
