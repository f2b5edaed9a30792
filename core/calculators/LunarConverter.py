#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Dict, Optional, Sequence, Union

from lunar_python import Lunar, LunarMonth, LunarYear, Solar

from core.calculators.bazi_logging import safe_log
from core.data.constants import JIE_NAMES

JIE_SEARCH_RETRIES = 5

PILLAR_KEYS = ('year', 'month', 'day', 'hour')


class CalendarProvider(ABC):
    """四柱干支来源能力接口"""

    name = ''
    required_methods: Sequence[str] = ()

    def supports(self, lunar) -> bool:
        return all(callable(getattr(lunar, method, None)) for method in self.required_methods)

    @abstractmethod
    def get_ganzhi(self, lunar) -> Dict[str, str]:
        """返回 {'year': '己巳', 'month': ..., 'day': ..., 'hour': ...}"""

    def get_pillars(self, lunar) -> Dict[str, Dict[str, str]]:
        pillars = {}
        for key, ganzhi in self.get_ganzhi(lunar).items():
            if not ganzhi or len(ganzhi) != 2:
                raise ValueError(f"{self.name} 历法返回了无效的{key}柱干支: {ganzhi!r}")
            pillars[key] = {'stem': ganzhi[0], 'branch': ganzhi[1]}
        return pillars


class PreciseCalendarProvider(CalendarProvider):
    """精确干支：年柱以立春、月柱以节令、日柱以 23 点为界"""

    name = 'precise'
    required_methods = ('getYearInGanZhiExact', 'getMonthInGanZhiExact', 'getDayInGanZhiExact', 'getTimeInGanZhi')

    def get_ganzhi(self, lunar) -> Dict[str, str]:
        return {
            'year': lunar.getYearInGanZhiExact(),
            'month': lunar.getMonthInGanZhiExact(),
            'day': lunar.getDayInGanZhiExact(),
            'hour': lunar.getTimeInGanZhi(),
        }


class NominalCalendarProvider(CalendarProvider):
    """名义干支：年柱以正月初一、月柱以农历月为界"""

    name = 'nominal'
    required_methods = ('getYearInGanZhi', 'getMonthInGanZhi', 'getDayInGanZhi', 'getTimeInGanZhi')

    def get_ganzhi(self, lunar) -> Dict[str, str]:
        return {
            'year': lunar.getYearInGanZhi(),
            'month': lunar.getMonthInGanZhi(),
            'day': lunar.getDayInGanZhi(),
            'hour': lunar.getTimeInGanZhi(),
        }


# 回退顺序：精确优先，名义兜底
CALENDAR_PROVIDER_ORDER = (PreciseCalendarProvider(), NominalCalendarProvider())


class LunarConverter:
    """农历转换工具类 - 公历/农历互转、四柱干支、节令区间"""

    @staticmethod
    def resolve_provider(lunar, providers: Sequence[CalendarProvider] = CALENDAR_PROVIDER_ORDER) -> CalendarProvider:
        """按回退顺序选出第一个可用的干支来源；非首选时记录 warning"""
        for position, provider in enumerate(providers):
            if provider.supports(lunar):
                if position > 0:
                    safe_log('warning', f"精确干支不可用，回退到 {provider.name} 历法")
                return provider
        raise ValueError("没有可用的干支历法来源")

    @staticmethod
    def get_bazi_pillars(lunar, providers: Sequence[CalendarProvider] = CALENDAR_PROVIDER_ORDER):
        provider = LunarConverter.resolve_provider(lunar, providers)
        return provider.get_pillars(lunar), provider.name

    @staticmethod
    def _parse_solar(solar_date: Union[str, date, datetime], solar_time: Optional[str] = None) -> Solar:
        if isinstance(solar_date, datetime):
            return Solar.fromYmdHms(solar_date.year, solar_date.month, solar_date.day,
                                    solar_date.hour, solar_date.minute, solar_date.second)
        if isinstance(solar_date, date):
            year, month, day = solar_date.year, solar_date.month, solar_date.day
        else:
            try:
                parsed = datetime.strptime(solar_date.strip(), '%Y-%m-%d')
            except (AttributeError, ValueError):
                raise ValueError(f"日期格式错误，应为 YYYY-MM-DD: {solar_date!r}")
            year, month, day = parsed.year, parsed.month, parsed.day

        if solar_time:
            try:
                parsed_time = datetime.strptime(solar_time.strip(), '%H:%M')
            except ValueError:
                raise ValueError(f"时间格式错误，应为 HH:MM: {solar_time!r}")
            hour, minute = parsed_time.hour, parsed_time.minute
        else:
            hour, minute = 12, 0  # 默认中午12点

        return Solar.fromYmdHms(year, month, day, hour, minute, 0)

    @staticmethod
    def _lunar_date_info(lunar) -> Dict:
        month = lunar.getMonth()
        return {
            'year': lunar.getYear(),
            'month': abs(month),
            'day': lunar.getDay(),
            'month_name': lunar.getMonthInChinese(),
            'day_name': lunar.getDayInChinese(),
            'is_leap_month': month < 0,
            'description': f"{lunar.getYearInChinese()}年{lunar.getMonthInChinese()}月{lunar.getDayInChinese()}",
        }

    @staticmethod
    def solar_to_lunar(solar_date, solar_time=None,
                       providers: Sequence[CalendarProvider] = CALENDAR_PROVIDER_ORDER) -> Dict:
        """
        将公历日期时间转换为农历信息与四柱干支

        Args:
            solar_date: 'YYYY-MM-DD'、date 或 datetime（datetime 时忽略 solar_time）
            solar_time: 'HH:MM'，可选

        Returns:
            dict: lunar_date、bazi_pillars、provider、leap_month、month_day_count
        """
        solar = LunarConverter._parse_solar(solar_date, solar_time)
        lunar = solar.getLunar()
        bazi_pillars, provider_name = LunarConverter.get_bazi_pillars(lunar, providers)
        lunar_date = LunarConverter._lunar_date_info(lunar)

        return {
            'solar_date': f"{solar.getYear():04d}-{solar.getMonth():02d}-{solar.getDay():02d}",
            'solar_time': f"{solar.getHour():02d}:{solar.getMinute():02d}",
            'lunar_date': lunar_date,
            'bazi_pillars': bazi_pillars,
            'provider': provider_name,
            'leap_month': LunarConverter.get_leap_month(lunar_date['year']),
            'month_day_count': LunarConverter.get_month_day_count(
                lunar_date['year'], lunar_date['month'], lunar_date['is_leap_month']),
        }

    @staticmethod
    def lunar_to_solar(lunar_year, lunar_month, lunar_day, is_leap_month=False) -> Dict:
        """
        将农历日期转换为公历

        Raises:
            ValueError: 农历日期不存在（如该年无此闰月、日期超出当月天数）
        """
        if not 1 <= lunar_month <= 12:
            raise ValueError(f"农历月份超出范围(1-12): {lunar_month}")
        if is_leap_month and LunarConverter.get_leap_month(lunar_year) != lunar_month:
            raise ValueError(f"农历{lunar_year}年没有闰{lunar_month}月")
        day_count = LunarConverter.get_month_day_count(lunar_year, lunar_month, is_leap_month)
        if not 1 <= lunar_day <= day_count:
            raise ValueError(f"农历日期超出当月天数({day_count}): {lunar_day}")

        try:
            lunar = Lunar.fromYmd(lunar_year, -lunar_month if is_leap_month else lunar_month, lunar_day)
            solar = lunar.getSolar()
        except Exception as e:
            raise ValueError(f"农历转阳历失败: {e}")

        return {
            'solar_date': f"{solar.getYear():04d}-{solar.getMonth():02d}-{solar.getDay():02d}",
            'solar_year': solar.getYear(),
            'solar_month': solar.getMonth(),
            'solar_day': solar.getDay(),
            'lunar_date': LunarConverter._lunar_date_info(lunar),
        }

    @staticmethod
    def get_leap_month(lunar_year) -> int:
        """该农历年的闰月，无闰月返回 0"""
        try:
            return abs(LunarYear.fromYear(lunar_year).getLeapMonth())
        except Exception as e:
            raise ValueError(f"农历年份不受支持: {lunar_year} ({e})")

    @staticmethod
    def get_month_day_count(lunar_year, lunar_month, is_leap_month=False) -> int:
        try:
            month = LunarMonth.fromYm(lunar_year, -lunar_month if is_leap_month else lunar_month)
        except Exception as e:
            raise ValueError(f"农历月份不受支持: {lunar_year}-{lunar_month} ({e})")
        if month is None:
            raise ValueError(f"农历月份不存在: {lunar_year}-{lunar_month}")
        return month.getDayCount()

    @staticmethod
    def _format_jieqi_time(solar) -> str:
        return (f"{solar.getYear():04d}-{solar.getMonth():02d}-{solar.getDay():02d} "
                f"{solar.getHour():02d}:{solar.getMinute():02d}")

    @staticmethod
    def _find_prev_jie(solar, max_retries):
        jieqi = solar.getLunar().getPrevJieQi(True)
        attempts = 0
        while jieqi is not None and jieqi.getName() not in JIE_NAMES and attempts < max_retries:
            # 遇到中气，退一天再找
            jieqi = jieqi.getSolar().next(-1).getLunar().getPrevJieQi(True)
            attempts += 1
        return jieqi if jieqi is not None and jieqi.getName() in JIE_NAMES else None

    @staticmethod
    def _find_next_jie(solar, max_retries):
        jieqi = solar.getLunar().getNextJieQi(False)
        attempts = 0
        while jieqi is not None and jieqi.getName() not in JIE_NAMES and attempts < max_retries:
            jieqi = jieqi.getSolar().next(1).getLunar().getNextJieQi(True)
            attempts += 1
        return jieqi if jieqi is not None and jieqi.getName() in JIE_NAMES else None

    @staticmethod
    def get_jie_month_range(focus_date, max_retries: int = JIE_SEARCH_RETRIES) -> Optional[Dict[str, str]]:
        """
        流月的节令区间：focus_date 之前最近的"节"到之后最近的"节"

        Returns:
            {'start', 'end', 'start_name', 'end_name'}，时间格式 'YYYY-MM-DD HH:MM'；
            查找失败返回 None（记录 warning，不抛异常）
        """
        try:
            solar = LunarConverter._parse_solar(focus_date)
            start = LunarConverter._find_prev_jie(solar, max_retries)
            # 从起始节的次日往后找，节当天午后交节时不会取回同一个节
            end = None
            if start is not None:
                end = LunarConverter._find_next_jie(start.getSolar().next(1), max_retries)
        except Exception as e:
            safe_log('warning', f"节令区间查询失败 {focus_date}: {e}")
            return None

        if end is not None and end.getSolar().toYmdHms() <= start.getSolar().toYmdHms():
            end = None

        if start is None or end is None:
            safe_log('warning', f"节令区间查询在 {max_retries} 次重试内未找到节: {focus_date}")
            return None

        return {
            'start': LunarConverter._format_jieqi_time(start.getSolar()),
            'end': LunarConverter._format_jieqi_time(end.getSolar()),
            'start_name': start.getName(),
            'end_name': end.getName(),
        }
