#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
py-iztro 星盘引擎适配器

在边界把 py_iztro 的模型一次性转换成 Raw* 结构并补齐默认值，下游不再判空。
"""

import logging
from datetime import datetime
from typing import Any, List, Optional

from py_iztro import Astro

from core.data.constants import GENDER_LABELS
from server.interfaces.ziwei_oracle_interface import IOracleChart, IZiweiOracle
from server.models.ziwei import (
    RawAstrolabeModel,
    RawDecadalModel,
    RawFlowLayerModel,
    RawHoroscopeModel,
    RawPalaceModel,
    StarModel,
)

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    return str(value) if value is not None else ""


def _iztro_date(date_str: str) -> str:
    """'YYYY-MM-DD' -> 'YYYY-M-D'"""
    parsed = datetime.strptime(date_str, '%Y-%m-%d')
    return f"{parsed.year}-{parsed.month}-{parsed.day}"


def _convert_star(star) -> StarModel:
    return StarModel(
        name=_text(getattr(star, 'name', '')),
        type=_text(getattr(star, 'type', '')),
        brightness=_text(getattr(star, 'brightness', '')),
        mutagen=_text(getattr(star, 'mutagen', '')),
        scope=_text(getattr(star, 'scope', '')),
    )


def _convert_stars(stars) -> List[StarModel]:
    return [_convert_star(star) for star in (stars or [])]


def _convert_palace(palace) -> RawPalaceModel:
    decadal = getattr(palace, 'decadal', None)
    decadal_range = list(getattr(decadal, 'range', None) or (0, 0))
    return RawPalaceModel(
        index=palace.index,
        name=_text(palace.name),
        heavenly_stem=_text(getattr(palace, 'heavenly_stem', '')),
        earthly_branch=_text(getattr(palace, 'earthly_branch', '')),
        is_body_palace=bool(getattr(palace, 'is_body_palace', False)),
        is_original_palace=bool(getattr(palace, 'is_original_palace', False)),
        major_stars=_convert_stars(getattr(palace, 'major_stars', None)),
        minor_stars=_convert_stars(getattr(palace, 'minor_stars', None)),
        adjective_stars=_convert_stars(getattr(palace, 'adjective_stars', None)),
        changsheng12=_text(getattr(palace, 'changsheng12', '')),
        boshi12=_text(getattr(palace, 'boshi12', '')),
        jiangqian12=_text(getattr(palace, 'jiangqian12', '')),
        suiqian12=_text(getattr(palace, 'suiqian12', '')),
        decadal=RawDecadalModel(
            range=(int(decadal_range[0]), int(decadal_range[-1])),
            heavenly_stem=_text(getattr(decadal, 'heavenly_stem', '')),
            earthly_branch=_text(getattr(decadal, 'earthly_branch', '')),
        ),
        ages=list(getattr(palace, 'ages', None) or []),
    )


def _convert_layer(layer) -> Optional[RawFlowLayerModel]:
    if layer is None:
        return None
    index = getattr(layer, 'index', None)
    return RawFlowLayerModel(
        index=index if isinstance(index, int) else -1,
        name=_text(getattr(layer, 'name', '')),
        heavenly_stem=_text(getattr(layer, 'heavenly_stem', '')),
        earthly_branch=_text(getattr(layer, 'earthly_branch', '')),
        palace_names=[_text(name) for name in (getattr(layer, 'palace_names', None) or [])],
        mutagen=[_text(name) for name in (getattr(layer, 'mutagen', None) or [])],
        stars=[_convert_stars(stars) for stars in (getattr(layer, 'stars', None) or [])],
    )


def convert_astrolabe(astrolabe) -> RawAstrolabeModel:
    return RawAstrolabeModel(
        palaces=[_convert_palace(palace) for palace in astrolabe.palaces],
        solar_date=_text(getattr(astrolabe, 'solar_date', '')),
        lunar_date=_text(getattr(astrolabe, 'lunar_date', '')),
        chinese_date=_text(getattr(astrolabe, 'chinese_date', '')),
        time=_text(getattr(astrolabe, 'time', '')),
        time_range=_text(getattr(astrolabe, 'time_range', '')),
        sign=_text(getattr(astrolabe, 'sign', '')),
        zodiac=_text(getattr(astrolabe, 'zodiac', '')),
        soul=_text(getattr(astrolabe, 'soul', '')),
        body=_text(getattr(astrolabe, 'body', '')),
        five_elements_class=_text(getattr(astrolabe, 'five_elements_class', '')),
    )


def convert_horoscope(horoscope, focus_date: str) -> RawHoroscopeModel:
    return RawHoroscopeModel(
        solar_date=_text(getattr(horoscope, 'solar_date', '')) or focus_date,
        lunar_date=_text(getattr(horoscope, 'lunar_date', '')),
        yearly=_convert_layer(getattr(horoscope, 'yearly', None)),
        monthly=_convert_layer(getattr(horoscope, 'monthly', None)),
    )


class IztroOracleChart(IOracleChart):
    """py_iztro AstrolabeModel 句柄"""

    def __init__(self, astrolabe):
        self._astrolabe = astrolabe
        self._raw = convert_astrolabe(astrolabe)

    @property
    def raw(self) -> RawAstrolabeModel:
        return self._raw

    def horoscope(self, focus_date: str) -> RawHoroscopeModel:
        return convert_horoscope(self._astrolabe.horoscope(_iztro_date(focus_date)), focus_date)


class IztroZiweiOracle(IZiweiOracle):
    """基于 py_iztro.Astro 的安星引擎"""

    def __init__(self, language: str = 'zh-CN', fix_leap: bool = True):
        self.language = language
        self.fix_leap = fix_leap
        self._astro = Astro()

    def by_solar(self, solar_date: str, time_index: int, gender: str) -> IztroOracleChart:
        logger.debug(f"py_iztro by_solar: {solar_date} time_index={time_index} gender={gender}")
        astrolabe = self._astro.by_solar(
            _iztro_date(solar_date),
            time_index=time_index,
            gender=GENDER_LABELS[gender]['iztro'],
            fix_leap=self.fix_leap,
            language=self.language,
        )
        return IztroOracleChart(astrolabe)

    def by_lunar(self, lunar_date: str, time_index: int, gender: str, is_leap_month: bool = False) -> IztroOracleChart:
        logger.debug(f"py_iztro by_lunar: {lunar_date} leap={is_leap_month} time_index={time_index}")
        astrolabe = self._astro.by_lunar(
            lunar_date,
            time_index=time_index,
            gender=GENDER_LABELS[gender]['iztro'],
            is_leap_month=is_leap_month,
            fix_leap=self.fix_leap,
            language=self.language,
        )
        return IztroOracleChart(astrolabe)
