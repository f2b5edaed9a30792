#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排盘服务测试（替身星盘引擎）
"""

import logging

import pytest

from core.calculators.dayun_calculator import DecadeLuckStrategy, LunarYunStrategy
from server.models.birth_spec import BirthSpec
from server.services.chart_service import DATA_SOURCE_PACKAGES, ChartService, parse_focus_date


class TestComputeChart:
    """compute_chart"""

    def test_deterministic(self, chart_service, sample_birth_spec):
        first = chart_service.compute_chart(sample_birth_spec, '2024-06-15')
        second = chart_service.compute_chart(sample_birth_spec, '2024-06-15')
        assert first.model_dump_json() == second.model_dump_json()

    def test_shape(self, sample_astrolabe):
        assert [p.index for p in sample_astrolabe.palaces] == list(range(12))
        assert list(sample_astrolabe.four_pillars) == ['year', 'month', 'day', 'hour']
        assert len(sample_astrolabe.bazi.pillars) == 4
        assert sample_astrolabe.chinese_date.split(' ') == [
            sample_astrolabe.four_pillars[key] for key in ('year', 'month', 'day', 'hour')
        ]
        assert sample_astrolabe.four_pillars['year'] == '己巳'
        assert sample_astrolabe.gender == 'Male'
        assert sample_astrolabe.original_gender == '乾造'

    def test_oracle_called_with_civil_date_and_corrected_index(self, chart_service, fake_oracle, sample_birth_spec):
        chart_service.compute_chart(sample_birth_spec)
        assert fake_oracle.calls == [{'method': 'solar', 'date': '1990-01-01', 'time_index': 6, 'gender': 'male'}]

    def test_longitude_changes_time_index(self, chart_service, fake_oracle, sample_birth_spec):
        """东经 150：11:00 校正为 13:00，进入未时"""
        spec = sample_birth_spec.model_copy(update={'birth_hour': 11, 'longitude': 150.0})
        astrolabe = chart_service.compute_chart(spec)
        assert fake_oracle.calls[-1]['time_index'] == 7
        assert astrolabe.time_index == 7
        assert astrolabe.corrected_solar_time == '1990-01-01 13:00'

    def test_lunar_input(self, chart_service, fake_oracle, sample_birth_spec):
        """农历 1989 年腊月初五即公历 1990-01-01"""
        spec = BirthSpec(calendar_type='lunar', lunar_year=1989, lunar_month=12, lunar_day=5,
                         birth_hour=12, longitude=120.0, gender='male')
        lunar_chart = chart_service.compute_chart(spec)
        solar_chart = chart_service.compute_chart(sample_birth_spec)

        assert fake_oracle.calls[0]['method'] == 'lunar'
        assert fake_oracle.calls[0]['date'] == '1989-12-5'
        assert fake_oracle.calls[0]['is_leap_month'] is False
        assert lunar_chart.solar_date == '1990-01-01'
        assert lunar_chart.four_pillars == solar_chart.four_pillars

    def test_raw_dates(self, sample_astrolabe):
        raw_dates = sample_astrolabe.raw_dates
        assert (raw_dates.lunar_year, raw_dates.lunar_month, raw_dates.lunar_day) == (1989, 12, 5)
        assert raw_dates.is_leap_month is False

    def test_no_focus_date_means_no_horoscope(self, chart_service, sample_birth_spec):
        astrolabe = chart_service.compute_chart(sample_birth_spec)
        assert astrolabe.horoscope is None
        assert astrolabe.focus_date is None
        assert astrolabe.current_decadal_mutagen is None

    def test_horoscope_failure_degrades(self, fake_oracle_factory, chart_config, sample_birth_spec, caplog):
        service = ChartService(oracle=fake_oracle_factory(fail_horoscope=True), chart_config=chart_config)
        with caplog.at_level(logging.WARNING):
            astrolabe = service.compute_chart(sample_birth_spec, '2024-06-15')
        assert astrolabe.horoscope is None
        assert len(astrolabe.palaces) == 12
        assert any('运限' in record.getMessage() for record in caplog.records)

    def test_horoscope_projected(self, sample_astrolabe, fake_year_index):
        horoscope = sample_astrolabe.horoscope
        assert horoscope is not None
        assert horoscope.year.index == fake_year_index(2024)
        assert horoscope.month_range.start_name == '芒种'

    def test_exactly_one_current_decade(self, sample_astrolabe):
        """1989 农历年生，2024 虚岁 36，落在 32 - 41 大限"""
        current = [m for m in sample_astrolabe.decadal_mutagens if m.is_current]
        assert len(current) == 1
        assert (current[0].start_age, current[0].end_age) == (32, 41)
        assert sample_astrolabe.current_decadal_mutagen == current[0]

    def test_natal_stem_falls_back_to_bazi_year(self, sample_astrolabe):
        assert sample_astrolabe.natal_mutagen.stem == '己'
        assert sample_astrolabe.natal_mutagen.lu.palace_indices == [4]

    def test_natal_stem_prefers_oracle(self, fake_oracle_factory, chart_config, sample_birth_spec):
        service = ChartService(oracle=fake_oracle_factory(chinese_date='庚午 丁丑 丙寅 甲午'), chart_config=chart_config)
        astrolabe = service.compute_chart(sample_birth_spec)
        assert astrolabe.natal_mutagen.stem == '庚'
        assert astrolabe.natal_mutagen.label == '庚干本命'

    def test_invalid_focus_date(self, chart_service, sample_birth_spec):
        with pytest.raises(ValueError):
            chart_service.compute_chart(sample_birth_spec, '2024/06/15')

    def test_invalid_lunar_date(self, chart_service):
        spec = BirthSpec(calendar_type='lunar', lunar_year=2024, lunar_month=1, lunar_day=30,
                         birth_hour=12, gender='male')
        with pytest.raises(ValueError):
            chart_service.compute_chart(spec)

    def test_metadata(self, sample_astrolabe):
        metadata = sample_astrolabe.metadata
        assert metadata.calendar_provider == 'precise'
        assert metadata.decade_luck_strategy == 'child_limit'
        assert set(metadata.data_sources) == set(DATA_SOURCE_PACKAGES)
        assert metadata.calendar_rules['year_boundary'] == '立春'

    def test_bazi_start_age_matches_first_decade(self, sample_astrolabe):
        bazi = sample_astrolabe.bazi
        assert bazi.start_yun_age == bazi.da_yun[0].start_age
        assert bazi.da_yun[0].ganzhi == '乙亥'


class TestStrategies:

    class BrokenStrategy(DecadeLuckStrategy):
        name = 'broken'

        def compute(self, birth_time, gender, max_decades=10, max_start_age=110):
            raise RuntimeError('no data')

    def test_fallback_strategy_recorded(self, fake_oracle, chart_config, sample_birth_spec):
        service = ChartService(oracle=fake_oracle, chart_config=chart_config,
                               decade_strategies=[self.BrokenStrategy(), LunarYunStrategy()])
        astrolabe = service.compute_chart(sample_birth_spec)
        assert astrolabe.bazi.da_yun_is_fallback is True
        assert astrolabe.metadata.decade_luck_strategy == 'lunar_yun'

    def test_all_strategies_fail(self, fake_oracle, chart_config, sample_birth_spec):
        service = ChartService(oracle=fake_oracle, chart_config=chart_config,
                               decade_strategies=[self.BrokenStrategy()])
        with pytest.raises(ValueError):
            service.compute_chart(sample_birth_spec)


class TestNatalReuse:

    def test_project_reuses_natal(self, chart_service, fake_oracle, sample_birth_spec):
        natal = chart_service.compute_natal(sample_birth_spec)
        a = chart_service.project(natal, '2023-03-01')
        b = chart_service.project(natal, '2024-06-15')
        assert len(fake_oracle.calls) == 1
        assert a.palaces == b.palaces
        assert a.horoscope.year.heavenly_stem != b.horoscope.year.heavenly_stem


class TestParseFocusDate:

    def test_valid(self):
        assert parse_focus_date('2024-06-15').year == 2024

    @pytest.mark.parametrize("value", ['', '2024-13-01', None, '15/06/2024'])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_focus_date(value)
