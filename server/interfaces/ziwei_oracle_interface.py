#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微星盘引擎接口
定义安星/运限引擎的抽象接口，排盘服务只依赖此接口
"""

from abc import ABC, abstractmethod

from server.models.ziwei import RawAstrolabeModel, RawHoroscopeModel


class IOracleChart(ABC):
    """已排好的本命盘句柄，可按日期反复取运限"""

    @property
    @abstractmethod
    def raw(self) -> RawAstrolabeModel:
        """本命盘原始数据"""
        pass

    @abstractmethod
    def horoscope(self, focus_date: str) -> RawHoroscopeModel:
        """
        指定日期的运限

        Args:
            focus_date: 'YYYY-MM-DD'
        """
        pass


class IZiweiOracle(ABC):
    """紫微斗数安星引擎接口"""

    @abstractmethod
    def by_solar(self, solar_date: str, time_index: int, gender: str) -> IOracleChart:
        """
        阳历排盘

        Args:
            solar_date: 'YYYY-MM-DD'
            time_index: 时辰序号 0-11
            gender: male/female
        """
        pass

    @abstractmethod
    def by_lunar(self, lunar_date: str, time_index: int, gender: str, is_leap_month: bool = False) -> IOracleChart:
        """农历排盘，lunar_date 为 'YYYY-M-D'"""
        pass
