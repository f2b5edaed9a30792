#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
真太阳时校正

地方平太阳时 = 北京时间 + (经度 - 120) * 4 分钟
（120 度为东八区标准经线，每 15 度差 1 小时，所以每度差 4 分钟）

不考虑均时差，时辰判定只依赖经度偏移。
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Tuple

from core.data.constants import TIME_BRANCH_LABELS

REFERENCE_MERIDIAN = 120.0
MINUTES_PER_DEGREE = 4
MINUTES_PER_DAY = 1440


@dataclass(frozen=True)
class CorrectedInstant:
    """校正后的出生时刻"""
    civil_datetime: datetime
    longitude: float
    offset_minutes: float
    corrected_datetime: datetime
    true_hour: float
    time_index: int

    @property
    def time_label(self) -> str:
        return get_chinese_time_label(self.time_index)

    def format_corrected(self) -> str:
        return self.corrected_datetime.strftime('%Y-%m-%d %H:%M')


def _validate(hour: int, minute: int, longitude: float) -> None:
    if not 0 <= hour <= 23:
        raise ValueError(f"小时超出范围(0-23): {hour}")
    if not 0 <= minute <= 59:
        raise ValueError(f"分钟超出范围(0-59): {minute}")
    if longitude is None or not -180 <= longitude <= 180:
        raise ValueError(f"经度超出范围(-180~180): {longitude}")


def get_longitude_offset(longitude: float) -> float:
    """经度时差（分钟），东正西负"""
    return (longitude - REFERENCE_MERIDIAN) * MINUTES_PER_DEGREE


def _true_hour_of_day(hour: int, minute: int, longitude: float) -> float:
    total_minutes = (hour * 60 + minute + get_longitude_offset(longitude)) % MINUTES_PER_DAY
    return total_minutes / 60


def _time_index_from_true_hour(true_hour: float) -> int:
    # 23:00-00:59 为子时
    if true_hour >= 23 or true_hour < 1:
        return 0
    if true_hour < 3:
        return 1
    return math.floor((true_hour + 1) / 2)


def calculate_time_index(hour: int, minute: int, longitude: float) -> int:
    """
    计算真太阳时对应的时辰序号（0=子 ... 11=亥）

    Args:
        hour: 北京时间小时 0-23
        minute: 分钟 0-59
        longitude: 出生地经度

    Returns:
        int: 时辰序号

    Raises:
        ValueError: 输入越界
    """
    _validate(hour, minute, longitude)
    return _time_index_from_true_hour(_true_hour_of_day(hour, minute, longitude))


def correct_birth_instant(civil_datetime: datetime, longitude: float) -> CorrectedInstant:
    """
    将出生的钟表时间校正为真太阳时

    校正后的时刻（可能跨日）是八字四柱与起运计算的唯一依据。
    """
    _validate(civil_datetime.hour, civil_datetime.minute, longitude)

    offset_minutes = get_longitude_offset(longitude)
    corrected = civil_datetime + timedelta(seconds=round(offset_minutes * 60))
    true_hour = _true_hour_of_day(civil_datetime.hour, civil_datetime.minute, longitude)

    return CorrectedInstant(
        civil_datetime=civil_datetime,
        longitude=longitude,
        offset_minutes=offset_minutes,
        corrected_datetime=corrected,
        true_hour=true_hour,
        time_index=_time_index_from_true_hour(true_hour),
    )


def get_chinese_time_label(index: int) -> str:
    """时辰标签，如 '子 (Zi)'；越界返回空串"""
    if isinstance(index, int) and 0 <= index < len(TIME_BRANCH_LABELS):
        return TIME_BRANCH_LABELS[index]
    return ''


def format_datetime_for_bazi(dt: datetime) -> Tuple[str, str]:
    """(date_str, time_str) -> ("YYYY-MM-DD", "HH:MM")"""
    return dt.strftime("%Y-%m-%d"), dt.strftime("%H:%M")
