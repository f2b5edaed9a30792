#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命盘纯文本报告（中英双语，等宽对齐）

用于复制粘贴和 LLM 分析输入。中文字符按宽度 2 计算对齐。
"""

from typing import List, Optional

from core.calculators.bazi_core_calculator import describe_element_relation
from core.calculators.true_solar_time import get_chinese_time_label
from core.data.constants import SI_HUA_LABELS
from server.adapters.dayun_adapter import DayunAdapter
from server.models.astrolabe import AstrolabeModel
from server.models.bazi import BaziChartModel, BaziPillarModel
from server.models.ziwei import FlowLayerModel, HoroscopeModel, PalaceModel, SiHuaModel, StarModel
from server.services.sihua_service import nominal_age

SEPARATOR = '-' * 48
TABLE_SEPARATOR = '-' * 56
STRENGTH_LABELS = {'strong': '身强', 'weak': '身弱', 'balanced': '中和'}


def display_width(text: str) -> int:
    """显示宽度：码位大于 255 的字符计 2"""
    return sum(2 if ord(ch) > 255 else 1 for ch in text)


def pad_right(text: str, width: int) -> str:
    return text + ' ' * max(0, width - display_width(text))


def _format_sihua(sihua: SiHuaModel) -> str:
    return f"禄-{sihua.lu}, 权-{sihua.quan}, 科-{sihua.ke}, 忌-{sihua.ji}"


def _palace_location(astrolabe: AstrolabeModel, index: int) -> str:
    if not 0 <= index < 12:
        return 'Unknown'
    palace = astrolabe.get_palace(index)
    return f"{palace.name} [{palace.earthly_branch}]"


def _clean_flow_name(name: str) -> str:
    return name.replace('流年', '').replace('流月', '').replace('宫', '')


def _is_life_name(name: Optional[str]) -> bool:
    return bool(name) and '命' in name


# ==================== 头部 ====================

def _format_header(astrolabe: AstrolabeModel) -> List[str]:
    pillars = astrolabe.four_pillars
    lines = [
        '【紫微斗数排盘 | Zi Wei Dou Shu Chart】',
        SEPARATOR,
        f"性别 (Gender): {astrolabe.original_gender} ({astrolabe.gender})",
        f"阳历 (Solar):  {astrolabe.solar_date} {astrolabe.birth_hour}:{astrolabe.birth_minute:02d} "
        f"({astrolabe.time or get_chinese_time_label(astrolabe.time_index)})",
        f"农历 (Lunar):  {astrolabe.lunar_date}",
        f"八字 (BaZi):   {pillars['year']}年 {pillars['month']}月 {pillars['day']}日 {pillars['hour']}时",
    ]
    location = f"经度 {astrolabe.longitude}°"
    if astrolabe.latitude is not None:
        location += f", 纬度 {astrolabe.latitude}°"
    lines.append(f"地点 (Loc):    {location} (真太阳时 True Solar Time)")
    lines.append(f"真太阳时:      {astrolabe.corrected_solar_time} "
                 f"({get_chinese_time_label(astrolabe.time_index)})")
    return lines


# ==================== 运限 ====================

def _format_flow_layer(astrolabe: AstrolabeModel, title: str, suffix: str,
                       layer: FlowLayerModel, sihua: Optional[SiHuaModel]) -> List[str]:
    lines = [
        f"{title}: {layer.heavenly_stem}{layer.earthly_branch}{suffix} "
        f"[命宫在 {_palace_location(astrolabe, layer.index)}]"
    ]
    if sihua:
        lines.append(f"  {'流年' if suffix == '年' else '流月'}四化: {_format_sihua(sihua)}")
    return lines


def _format_horoscope(astrolabe: AstrolabeModel, horoscope: HoroscopeModel) -> List[str]:
    lines = [
        '',
        '【流运设定 (Flow Rules)】',
        '起法规则: 流年按立春交节(Solar Terms), 流月按节气(Solar Terms)',
        SEPARATOR,
    ]
    lines += _format_flow_layer(astrolabe, '流年 (Year)', '年', horoscope.year, horoscope.year_sihua)
    if horoscope.month:
        lines += _format_flow_layer(astrolabe, '流月 (Month)', '月', horoscope.month, horoscope.month_sihua)

    month_range = horoscope.month_range
    if month_range:
        lines.append(f"  流月范围: 起于 {month_range.start_name} ({month_range.start})")
        lines.append(f"            止于 {month_range.end_name} ({month_range.end})")
        lines.append('            (注: 以上为北京时间 UTC+8 交节时刻)')
    else:
        lines.append('  流月范围: 请参考万年历节气交接日')

    lines += [
        '',
        '【流运对照表 (Flow Palace Cross-Reference)】',
        TABLE_SEPARATOR,
        '地支 (Branch)| 本命 (Original) | 流年 (Year) | 流月 (Month)',
        TABLE_SEPARATOR,
    ]
    month_names = horoscope.month.palace_names if horoscope.month else {}
    for palace in astrolabe.palaces:
        year_name = horoscope.year.palace_names.get(palace.index)
        month_name = month_names.get(palace.index)
        lines.append(
            f"{pad_right(f'[{palace.earthly_branch}]', 8)}| {pad_right(palace.name, 10)}| "
            f"{pad_right(_clean_flow_name(year_name) if year_name else '--', 10)}| "
            f"{_clean_flow_name(month_name) if month_name else '--'}"
        )
    lines.append(TABLE_SEPARATOR)
    return lines


# ==================== 八字 ====================

def _format_pillar(pillar: BaziPillarModel) -> List[str]:
    hidden = ' '.join(f"{item.char}{item.wuxing}({item.shishen})" for item in pillar.zhi.hidden)
    lines = [
        f"  {pillar.name}: {pillar.ganzhi}  "
        f"{pillar.gan.char}{pillar.gan.wuxing}({pillar.gan.shishen}) / {pillar.zhi.char}{pillar.zhi.wuxing}",
        f"    藏干: {hidden or '--'}",
        f"    纳音: {pillar.nayin or '--'} | 空亡: {pillar.kongwang or '--'} | 星运: {pillar.changsheng or '--'}",
    ]
    if pillar.shensha:
        lines.append(f"    神煞: {' '.join(pillar.shensha)}")
    return lines


def _format_bazi(bazi: BaziChartModel, current_age: Optional[int] = None) -> List[str]:
    lines = ['', '【八字命盘 (BaZi Chart)】', SEPARATOR,
             f"日主 (Day Master): {bazi.day_master}{bazi.day_master_wuxing}"]
    for pillar in bazi.pillars:
        lines += _format_pillar(pillar)

    tally = bazi.five_elements.total
    lines.append('五行统计 (Elements): ' + ' '.join(f"{element}{count}" for element, count in tally.items()))

    strength = bazi.day_master_strength
    lines.append(
        f"日主强弱 (Strength): {STRENGTH_LABELS.get(strength.level, strength.level)} "
        f"(生扶 {strength.supportive_score} / 克泄 {strength.opposing_score}) [简化评分, 仅供参考]"
    )
    if strength.favorable_elements:
        favorable = ' '.join(f"{e}({describe_element_relation(bazi.day_master, e)})"
                             for e in strength.favorable_elements)
        lines.append(f"  喜: {favorable}")
    if strength.unfavorable_elements:
        unfavorable = ' '.join(f"{e}({describe_element_relation(bazi.day_master, e)})"
                               for e in strength.unfavorable_elements)
        lines.append(f"  忌: {unfavorable}")

    if bazi.start_yun_age is not None:
        lines.append(f"起运 (Start Luck): {bazi.start_yun_age}岁 ({bazi.start_yun_date or '--'})")
    if bazi.da_yun:
        current = DayunAdapter.find_by_age(bazi.da_yun, current_age) if current_age is not None else None
        lines.append('大运 (Da Yun):')
        for dayun in bazi.da_yun:
            lines.append(
                f"  {pad_right(dayun.age_display, 10)}{dayun.ganzhi} "
                f"{dayun.start_year}-{dayun.end_year} {dayun.gan.shishen} {dayun.nayin}"
                + (' <当前>' if dayun == current else '')
            )
    lines.append(SEPARATOR)
    return lines


# ==================== 十二宫 ====================

def _flow_tags(star: StarModel, horoscope: Optional[HoroscopeModel]) -> List[str]:
    if horoscope is None:
        return []
    tags = []
    for prefix, sihua in (('年', horoscope.year_sihua), ('月', horoscope.month_sihua)):
        if sihua is None:
            continue
        for slot, label in SI_HUA_LABELS.items():
            if star.name == getattr(sihua, slot):
                tags.append(f"{prefix}{label}")
    return tags


def _format_star(star: StarModel, horoscope: Optional[HoroscopeModel]) -> str:
    text = star.name
    if star.mutagen:
        text += f"[{star.mutagen}]"
    if star.brightness:
        text += f"({star.brightness})"
    tags = _flow_tags(star, horoscope)
    if tags:
        text += '{' + ','.join(tags) + '}'
    return text


def _palace_labels(palace: PalaceModel, horoscope: Optional[HoroscopeModel]) -> str:
    labels = []
    if palace.is_original_palace and _is_life_name(palace.name):
        labels.append('【本命】')
    if palace.is_body_palace:
        labels.append('【身宫】')
    if horoscope is not None:
        if _is_life_name(horoscope.year.palace_names.get(palace.index)):
            labels.append('<流年命宫>')
        if horoscope.month and _is_life_name(horoscope.month.palace_names.get(palace.index)):
            labels.append('<流月命宫>')
    if palace.is_empty:
        labels.append('(空宫)')
    return ''.join(labels)


def _format_palace(astrolabe: AstrolabeModel, palace: PalaceModel) -> List[str]:
    horoscope = astrolabe.horoscope

    def stars_text(stars):
        return '  '.join(_format_star(star, horoscope) for star in stars) or '--'

    lines = [
        f"{palace.name} [{palace.heavenly_stem}{palace.earthly_branch}] {_palace_labels(palace, horoscope)}".rstrip(),
        f"  大限 (Decadal): {palace.decadal.range} | 宫干: {palace.heavenly_stem}",
        f"  主星 (Major): {stars_text(palace.major_stars)}",
        f"  辅星 (Minor): {stars_text(palace.minor_stars)}",
        f"  杂曜 (Mini):  {stars_text(palace.adjective_stars)}",
    ]
    if palace.borrowed is not None and palace.borrowed.stars:
        borrowed = ' '.join(star.name for star in palace.borrowed.stars)
        lines.append(f"  借星 (Borrowed): {borrowed} <- {palace.borrowed.from_name} ({palace.borrowed.rule})")

    if horoscope is not None and horoscope.month is not None:
        flow_stars = ' '.join(
            star.name + (f"[流{star.mutagen}]" if star.mutagen else '')
            for star in horoscope.month.palaces.get(palace.index, [])
        )
        if flow_stars:
            lines.append(f"  流曜 (Flow):  {flow_stars}")

    lines += [
        f"  长生12: {palace.changsheng12}",
        f"  博士12: {palace.boshi12}",
        f"  岁前12: {palace.suiqian12}",
        f"  将前12: {palace.jiangqian12}",
        '',
    ]
    return lines


def format_as_plain_text(astrolabe: AstrolabeModel) -> str:
    """
    生成命盘纯文本报告

    Args:
        astrolabe: 命盘

    Returns:
        str: 多行文本，以换行结尾
    """
    lines = _format_header(astrolabe)
    if astrolabe.horoscope is not None:
        lines += _format_horoscope(astrolabe, astrolabe.horoscope)

    lines += [
        '',
        f"五行局 (Element): {astrolabe.five_elements_class}",
        f"命主 (Ming Zhu):  {astrolabe.soul}",
        f"身主 (Shen Zhu):  {astrolabe.body}",
    ]
    current_age = None
    if astrolabe.focus_date:
        current_age = nominal_age(astrolabe.raw_dates.lunar_year, int(astrolabe.focus_date[:4]))
    lines += _format_bazi(astrolabe.bazi, current_age)
    lines.append('')

    for palace in astrolabe.palaces:
        lines += _format_palace(astrolabe, palace)

    return '\n'.join(lines) + '\n'
