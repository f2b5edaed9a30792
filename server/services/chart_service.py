#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排盘服务 - 紫微斗数 + 八字

流程：
出生信息 -> 真太阳时 -> 历法/四柱 -> 八字+大运 -> 紫微十二宫（归一化）
-> 本命/大限四化 -> 流年流月投影 -> AstrolabeModel

本命部分与运限部分分开：同一本命盘换日期只重算运限。
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from importlib import metadata
from typing import Dict, List, Optional, Sequence

from core.calculators.LunarConverter import LunarConverter
from core.calculators.bazi_core_calculator import BaziCoreCalculator
from core.calculators.dayun_calculator import DecadeLuckStrategy, calculate_dayun
from core.calculators.true_solar_time import (
    CorrectedInstant,
    correct_birth_instant,
    format_datetime_for_bazi,
)
from core.data.constants import GENDER_LABELS, RULE_VERSION
from core.data.stems_branches import is_valid_stem
from server.adapters.bazi_chart_adapter import BaziChartAdapter
from server.config.app_config import ChartConfig, get_config
from server.interfaces.ziwei_oracle_interface import IOracleChart, IZiweiOracle
from server.models.astrolabe import AstrolabeModel, ChartMetadataModel, RawDatesModel
from server.models.bazi import BaziChartModel
from server.models.birth_spec import BirthSpec
from server.models.ziwei import MutagenMapModel, PalaceModel
from server.services.horoscope_service import project_horoscope
from server.services.sihua_service import build_decadal_mutagens, build_mutagen_map, nominal_age
from server.services.ziwei_palace_normalizer import normalize_palaces

logger = logging.getLogger(__name__)

DATA_SOURCE_PACKAGES = ('lunar_python', 'tyme4py', 'py-iztro')


@dataclass(frozen=True)
class NatalChart:
    """本命部分（与运限日期无关）"""
    birth_spec: BirthSpec
    civil_datetime: datetime
    corrected: CorrectedInstant
    raw_dates: RawDatesModel
    lunar_description: str
    bazi: BaziChartModel
    calendar_provider: str
    oracle_chart: IOracleChart
    palaces: List[PalaceModel]
    natal_mutagen: Optional[MutagenMapModel]


def _package_versions() -> Dict[str, str]:
    versions = {}
    for package in DATA_SOURCE_PACKAGES:
        try:
            versions[package] = metadata.version(package)
        except metadata.PackageNotFoundError:
            versions[package] = 'not installed'
    return versions


def _calendar_rules(provider: str) -> Dict[str, str]:
    precise = provider == 'precise'
    return {
        'time_correction': 'longitude offset (lon - 120) * 4 min',
        'year_boundary': '立春' if precise else '正月初一',
        'month_boundary': '节令' if precise else '农历月',
        'day_boundary': '23:00',
        'ziwei_input': 'civil date + corrected time index',
    }


def parse_focus_date(focus_date: str) -> datetime:
    try:
        return datetime.strptime(focus_date, '%Y-%m-%d')
    except (TypeError, ValueError):
        raise ValueError(f"运限日期格式错误，应为 YYYY-MM-DD: {focus_date!r}")


class ChartService:
    """排盘服务"""

    def __init__(self, oracle: Optional[IZiweiOracle] = None,
                 chart_config: Optional[ChartConfig] = None,
                 decade_strategies: Optional[Sequence[DecadeLuckStrategy]] = None):
        self.config = chart_config or get_config().chart
        self.decade_strategies = decade_strategies
        self._oracle = oracle

    @property
    def oracle(self) -> IZiweiOracle:
        if self._oracle is None:
            # 延迟导入：py_iztro 初始化较重，且测试中通常注入替身
            from server.adapters.iztro_oracle_adapter import IztroZiweiOracle
            self._oracle = IztroZiweiOracle(language=self.config.language, fix_leap=self.config.fix_leap)
        return self._oracle

    # ==================== 本命 ====================

    @staticmethod
    def _civil_datetime(spec: BirthSpec) -> datetime:
        if spec.calendar_type == 'lunar':
            solar_date = LunarConverter.lunar_to_solar(
                spec.lunar_year, spec.lunar_month, spec.lunar_day, spec.is_leap_month)['solar_date']
        else:
            solar_date = spec.solar_date
        return datetime.strptime(solar_date, '%Y-%m-%d').replace(hour=spec.birth_hour, minute=spec.birth_minute)

    def _build_oracle_chart(self, spec: BirthSpec, civil_datetime: datetime, time_index: int) -> IOracleChart:
        if spec.calendar_type == 'lunar':
            lunar_date = f"{spec.lunar_year}-{spec.lunar_month}-{spec.lunar_day}"
            return self.oracle.by_lunar(lunar_date, time_index, spec.gender, spec.is_leap_month)
        return self.oracle.by_solar(civil_datetime.strftime('%Y-%m-%d'), time_index, spec.gender)

    @staticmethod
    def _natal_stem(oracle_chart: IOracleChart, bazi: BaziChartModel) -> str:
        # 本命四化跟随星盘引擎的年干，保持与星曜上的四化标注一致
        chinese_date = oracle_chart.raw.chinese_date.strip()
        if chinese_date and is_valid_stem(chinese_date[0]):
            return chinese_date[0]
        return bazi.pillars[0].gan.char

    def compute_natal(self, spec: BirthSpec) -> NatalChart:
        """
        计算本命部分

        Raises:
            ValueError: 输入不合法
        """
        civil_datetime = self._civil_datetime(spec)
        corrected = correct_birth_instant(civil_datetime, spec.longitude)
        logger.info(
            f"排盘: {civil_datetime:%Y-%m-%d %H:%M} 经度{spec.longitude} -> 真太阳时 "
            f"{corrected.format_corrected()} ({corrected.time_label})"
        )

        solar_date, solar_time = format_datetime_for_bazi(corrected.corrected_datetime)
        core_result = BaziCoreCalculator(solar_date, solar_time, spec.gender).calculate()
        dayun_result = calculate_dayun(
            corrected.corrected_datetime, spec.gender, core_result['day_master'],
            strategies=self.decade_strategies,
            max_decades=self.config.max_decades,
            max_start_age=self.config.max_start_age,
        )
        bazi = BaziChartAdapter.to_chart_model(core_result, dayun_result)

        civil_lunar = LunarConverter.solar_to_lunar(civil_datetime)
        lunar = civil_lunar['lunar_date']
        raw_dates = RawDatesModel(
            lunar_year=lunar['year'],
            lunar_month=lunar['month'],
            lunar_day=lunar['day'],
            is_leap_month=lunar['is_leap_month'],
            leap_month=civil_lunar['leap_month'],
            month_day_count=civil_lunar['month_day_count'],
        )

        oracle_chart = self._build_oracle_chart(spec, civil_datetime, corrected.time_index)
        palaces = normalize_palaces(oracle_chart.raw.palaces)

        natal_stem = self._natal_stem(oracle_chart, bazi)
        natal_mutagen = build_mutagen_map(natal_stem, palaces, 'natal', label=f"{natal_stem}干本命")

        return NatalChart(
            birth_spec=spec,
            civil_datetime=civil_datetime,
            corrected=corrected,
            raw_dates=raw_dates,
            lunar_description=lunar['description'],
            bazi=bazi,
            calendar_provider=core_result['basic_info']['calendar_provider'],
            oracle_chart=oracle_chart,
            palaces=palaces,
            natal_mutagen=natal_mutagen,
        )

    # ==================== 运限 ====================

    def project(self, natal: NatalChart, focus_date: Optional[str] = None) -> AstrolabeModel:
        """
        在本命盘上叠加运限，生成命盘快照

        focus_date 为空时不生成运限。运限引擎失败时降级为无运限并记录 warning。
        """
        horoscope = None
        current_age = None
        if focus_date is not None:
            focus = parse_focus_date(focus_date)
            current_age = nominal_age(natal.raw_dates.lunar_year, focus.year)
            try:
                raw_horoscope = natal.oracle_chart.horoscope(focus_date)
                horoscope = project_horoscope(raw_horoscope, focus_date, natal.palaces,
                                              jie_retries=self.config.jie_search_retries)
            except Exception as e:
                logger.warning(f"运限计算失败，按无运限处理 ({focus_date}): {e}")

        spec = natal.birth_spec
        raw = natal.oracle_chart.raw
        four_pillars = {p.pillar_type: p.ganzhi for p in natal.bazi.pillars}
        gender_labels = GENDER_LABELS[spec.gender]

        return AstrolabeModel(
            palaces=natal.palaces,
            solar_date=natal.civil_datetime.strftime('%Y-%m-%d'),
            lunar_date=raw.lunar_date or natal.lunar_description,
            chinese_date=' '.join(four_pillars[key] for key in ('year', 'month', 'day', 'hour')),
            raw_dates=natal.raw_dates,
            four_pillars=four_pillars,
            bazi=natal.bazi,
            time=raw.time,
            time_range=raw.time_range,
            sign=raw.sign,
            zodiac=raw.zodiac,
            soul=raw.soul,
            body=raw.body,
            five_elements_class=raw.five_elements_class,
            gender=gender_labels['gender'],
            original_gender=gender_labels['original'],
            natal_mutagen=natal.natal_mutagen,
            decadal_mutagens=build_decadal_mutagens(natal.palaces, current_age),
            horoscope=horoscope,
            focus_date=focus_date,
            longitude=spec.longitude,
            latitude=spec.latitude,
            birth_hour=spec.birth_hour,
            birth_minute=spec.birth_minute,
            time_index=natal.corrected.time_index,
            corrected_solar_time=natal.corrected.format_corrected(),
            metadata=ChartMetadataModel(
                rule_version=RULE_VERSION,
                calendar_provider=natal.calendar_provider,
                decade_luck_strategy=natal.bazi.da_yun_strategy,
                calendar_rules=_calendar_rules(natal.calendar_provider),
                data_sources=_package_versions(),
            ),
        )

    def compute_chart(self, spec: BirthSpec, focus_date: Optional[str] = None) -> AstrolabeModel:
        """排盘入口：相同输入得到相同输出"""
        return self.project(self.compute_natal(spec), focus_date)


_default_service: Optional[ChartService] = None


def get_chart_service() -> ChartService:
    global _default_service
    if _default_service is None:
        _default_service = ChartService()
    return _default_service


def compute_chart(birth_spec: BirthSpec, focus_date: Optional[str] = None) -> AstrolabeModel:
    """模块级便捷入口，使用默认 py_iztro 引擎"""
    return get_chart_service().compute_chart(birth_spec, focus_date)
