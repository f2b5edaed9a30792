#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest 全局配置

提供：
- 共享 fixtures（应用、客户端、出生信息、替身星盘引擎）
- 测试钩子
"""

import pytest
import sys
import os
from typing import Any, Dict, List

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from core.data.constants import PALACE_NAMES
from core.data.stems_branches import EARTHLY_BRANCHES, SIXTY_JIAZI
from server.config.app_config import ChartConfig
from server.interfaces.ziwei_oracle_interface import IOracleChart, IZiweiOracle
from server.models.birth_spec import BirthSpec
from server.models.ziwei import (
    RawAstrolabeModel,
    RawDecadalModel,
    RawFlowLayerModel,
    RawHoroscopeModel,
    RawPalaceModel,
    StarModel,
)


# ==================== 替身星盘引擎 ====================

# index -> (主星, 辅星, 杂曜)，星名后缀 ':x' 表示亮度，'!x' 表示本命四化
FAKE_PALACE_STARS = {
    0: (['紫微:庙', '天府:庙'], ['左辅'], []),
    1: ([], ['文昌'], ['天姚']),
    2: (['天机:利', '天梁:庙!科'], ['擎羊'], ['红鸾']),
    3: (['太阳:旺'], ['陀罗'], []),
    4: (['武曲:平!禄', '破军:旺'], ['文曲!忌'], []),
    5: (['天同:陷'], [], ['天刑']),
    6: (['巨门:庙'], ['火星'], []),
    7: (['廉贞:平', '贪狼:平!权'], [], []),
    8: (['太阴:庙'], ['铃星'], []),
    9: ([], ['地空', '地劫'], []),
    10: (['七杀:旺'], ['右弼'], []),
    11: (['天相:得'], [], ['天喜']),
}
FAKE_PALACE_STEMS = ('丙', '丁', '戊', '己', '庚', '辛', '壬', '癸', '甲', '乙', '丙', '丁')
FAKE_LIFE_INDEX = 2
FAKE_BODY_INDEX = 6


def _star(spec: str, star_type: str) -> StarModel:
    name, _, mutagen = spec.partition('!')
    name, _, brightness = name.partition(':')
    return StarModel(name=name, type=star_type, brightness=brightness, mutagen=mutagen, scope='origin')


def build_fake_raw_palaces() -> List[RawPalaceModel]:
    """十二宫（index 0 为寅），命宫在 index 2，大限从命宫起顺行"""
    palaces = []
    for index in range(12):
        majors, minors, adjectives = FAKE_PALACE_STARS[index]
        seq = (FAKE_LIFE_INDEX - index) % 12
        step = (index - FAKE_LIFE_INDEX) % 12
        palaces.append(RawPalaceModel(
            index=index,
            name=PALACE_NAMES[seq],
            heavenly_stem=FAKE_PALACE_STEMS[index],
            earthly_branch=EARTHLY_BRANCHES[(index + 2) % 12],
            is_body_palace=index == FAKE_BODY_INDEX,
            is_original_palace=index == FAKE_LIFE_INDEX,
            major_stars=[_star(s, 'major') for s in majors],
            minor_stars=[_star(s, 'soft') for s in minors],
            adjective_stars=[_star(s, 'adjective') for s in adjectives],
            changsheng12='长生',
            boshi12='博士',
            jiangqian12='将星',
            suiqian12='岁建',
            decadal=RawDecadalModel(
                range=(2 + 10 * step, 11 + 10 * step),
                heavenly_stem=FAKE_PALACE_STEMS[index],
                earthly_branch=EARTHLY_BRANCHES[(index + 2) % 12],
            ),
            ages=[index + 1 + 12 * n for n in range(3)],
        ))
    return palaces


def fake_year_life_index(year: int) -> int:
    """流年命宫落在与流年地支相同的宫"""
    branch = SIXTY_JIAZI[(year - 4) % 60][1]
    return (EARTHLY_BRANCHES.index(branch) - 2) % 12


class FakeOracleChart(IOracleChart):
    def __init__(self, chinese_date: str = '', fail_horoscope: bool = False):
        self._raw = RawAstrolabeModel(
            palaces=build_fake_raw_palaces(),
            lunar_date='一九八九年腊月初五',
            chinese_date=chinese_date,
            time='午时',
            time_range='11:00~13:00',
            sign='摩羯座',
            zodiac='蛇',
            soul='禄存',
            body='天同',
            five_elements_class='水二局',
        )
        self.fail_horoscope = fail_horoscope
        self.horoscope_calls: List[str] = []

    @property
    def raw(self) -> RawAstrolabeModel:
        return self._raw

    def horoscope(self, focus_date: str) -> RawHoroscopeModel:
        self.horoscope_calls.append(focus_date)
        if self.fail_horoscope:
            raise RuntimeError('horoscope engine unavailable')

        year, month = int(focus_date[:4]), int(focus_date[5:7])
        year_ganzhi = SIXTY_JIAZI[(year - 4) % 60]
        month_ganzhi = SIXTY_JIAZI[(year * 12 + month) % 60]
        year_index = fake_year_life_index(year)
        month_index = (year_index + month - 1) % 12

        year_names = [''] * 12
        year_names[year_index] = '流年命宫'
        year_stars = [[] for _ in range(12)]
        year_stars[year_index] = [StarModel(name='流昌', type='flower', scope='yearly')]
        month_stars = [[] for _ in range(12)]
        month_stars[month_index] = [StarModel(name='月马', type='tianma', scope='monthly', mutagen='禄')]

        return RawHoroscopeModel(
            solar_date=focus_date,
            lunar_date='',
            yearly=RawFlowLayerModel(
                index=year_index,
                name='流年',
                heavenly_stem=year_ganzhi[0],
                earthly_branch=year_ganzhi[1],
                palace_names=year_names,
                stars=year_stars,
            ),
            monthly=RawFlowLayerModel(
                index=month_index,
                name='流月',
                heavenly_stem=month_ganzhi[0],
                earthly_branch=month_ganzhi[1],
                stars=month_stars,
            ),
        )


class FakeZiweiOracle(IZiweiOracle):
    """确定性的星盘引擎替身，记录调用参数"""

    def __init__(self, chinese_date: str = '', fail_horoscope: bool = False):
        self.chinese_date = chinese_date
        self.fail_horoscope = fail_horoscope
        self.calls: List[Dict[str, Any]] = []

    def by_solar(self, solar_date: str, time_index: int, gender: str) -> FakeOracleChart:
        self.calls.append({'method': 'solar', 'date': solar_date, 'time_index': time_index, 'gender': gender})
        return FakeOracleChart(self.chinese_date, self.fail_horoscope)

    def by_lunar(self, lunar_date: str, time_index: int, gender: str, is_leap_month: bool = False) -> FakeOracleChart:
        self.calls.append({'method': 'lunar', 'date': lunar_date, 'time_index': time_index,
                           'gender': gender, 'is_leap_month': is_leap_month})
        return FakeOracleChart(self.chinese_date, self.fail_horoscope)


# ==================== 应用和客户端 Fixtures ====================

@pytest.fixture(scope="session")
def app():
    """
    创建 FastAPI 应用实例（整个测试会话共享）
    """
    from server.main import app
    return app


@pytest.fixture(scope="session")
def client(app):
    """
    创建测试客户端（整个测试会话共享）
    """
    from fastapi.testclient import TestClient
    return TestClient(app)


# ==================== 数据 Fixtures ====================

@pytest.fixture(scope="function")
def sample_birth_spec() -> BirthSpec:
    """1990-01-01 12:00，东经 120，男"""
    return BirthSpec(
        calendar_type='solar',
        solar_date='1990-01-01',
        birth_hour=12,
        birth_minute=0,
        longitude=120.0,
        latitude=30.0,
        gender='male',
    )


@pytest.fixture(scope="function")
def sample_chart_request() -> Dict[str, Any]:
    """排盘请求"""
    return {
        "solar_date": "1990-01-01",
        "birth_hour": 12,
        "birth_minute": 0,
        "longitude": 120.0,
        "latitude": 30.0,
        "gender": "male",
        "focus_date": "1990-01-01",
    }


@pytest.fixture(scope="function")
def raw_palaces() -> List[RawPalaceModel]:
    return build_fake_raw_palaces()


@pytest.fixture(scope="function")
def fake_oracle() -> FakeZiweiOracle:
    return FakeZiweiOracle()


@pytest.fixture(scope="function")
def fake_oracle_chart() -> FakeOracleChart:
    return FakeOracleChart()


@pytest.fixture(scope="function")
def fake_oracle_factory():
    """按需构造替身引擎"""
    def factory(chinese_date: str = '', fail_horoscope: bool = False) -> FakeZiweiOracle:
        return FakeZiweiOracle(chinese_date, fail_horoscope)
    return factory


@pytest.fixture(scope="function")
def chart_config() -> ChartConfig:
    return ChartConfig()


@pytest.fixture(scope="function")
def chart_service(fake_oracle, chart_config):
    from server.services.chart_service import ChartService
    return ChartService(oracle=fake_oracle, chart_config=chart_config)


@pytest.fixture(scope="function")
def sample_astrolabe(chart_service, sample_birth_spec):
    return chart_service.compute_chart(sample_birth_spec, '2024-06-15')


@pytest.fixture(scope="function")
def fake_year_index():
    return fake_year_life_index


# ==================== Pytest Hooks ====================

def pytest_configure(config):
    """
    pytest 配置钩子
    """
    config.addinivalue_line("markers", "slow: 标记为慢速测试，可通过 -m 'not slow' 跳过")
    config.addinivalue_line("markers", "integration: 集成测试")
    config.addinivalue_line("markers", "unit: 单元测试")
    config.addinivalue_line("markers", "api: API 测试")


def pytest_collection_modifyitems(config, items):
    """
    根据路径自动添加标记
    """
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        elif "unit" in item.nodeid:
            item.add_marker(pytest.mark.unit)
        elif "api" in item.nodeid:
            item.add_marker(pytest.mark.api)
