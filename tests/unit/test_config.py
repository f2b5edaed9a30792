#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置管理单元测试
测试统一配置管理
"""

import pytest
import os
from unittest.mock import patch

from server.config.app_config import (
    AppConfig,
    ChartConfig,
    LLMConfig,
    get_config,
    reload_config
)
from server.config.env_config import EnvConfig, reset_env_config


@pytest.fixture(autouse=True)
def restore_config():
    """测试结束后按真实环境重建配置单例"""
    yield
    reload_config()


class TestConfig:
    """配置测试类"""

    def test_chart_config_from_env(self):
        """测试从环境变量创建排盘配置"""
        with patch.dict(os.environ, {
            'CHART_DEFAULT_LONGITUDE': '116.4',
            'CHART_LANGUAGE': 'en-US',
            'CHART_FIX_LEAP': 'false',
            'CHART_MAX_DECADES': '8',
            'CHART_MAX_START_AGE': '90',
            'CHART_JIE_SEARCH_RETRIES': '3',
        }):
            config = ChartConfig.from_env()

            assert config.default_longitude == 116.4
            assert config.language == 'en-US'
            assert config.fix_leap is False
            assert config.max_decades == 8
            assert config.max_start_age == 90
            assert config.jie_search_retries == 3

    def test_chart_config_defaults(self):
        """测试排盘配置默认值"""
        with patch.dict(os.environ, {}, clear=True):
            config = ChartConfig.from_env()

            assert config.default_longitude == 120.0
            assert config.language == 'zh-CN'
            assert config.fix_leap is True
            assert config.max_decades == 10
            assert config.max_start_age == 110
            assert config.jie_search_retries == 5

    def test_invalid_number_uses_default(self):
        with patch.dict(os.environ, {'CHART_MAX_DECADES': 'ten', 'CHART_DEFAULT_LONGITUDE': 'east'}):
            config = ChartConfig.from_env()

            assert config.max_decades == 10
            assert config.default_longitude == 120.0

    def test_llm_config_from_env(self):
        """测试从环境变量创建 LLM 配置"""
        with patch.dict(os.environ, {
            'LLM_API_BASE': 'https://llm.example.com/v1/',
            'LLM_API_KEY': 'sk-test',
            'LLM_MODEL': 'test-model',
            'LLM_TEMPERATURE': '0.2',
            'LLM_TIMEOUT': '30',
        }):
            config = LLMConfig.from_env()

            assert config.api_base == 'https://llm.example.com/v1'
            assert config.api_key == 'sk-test'
            assert config.model == 'test-model'
            assert config.temperature == 0.2
            assert config.timeout == 30
            assert config.is_configured is True

    def test_llm_not_configured_without_key(self):
        with patch.dict(os.environ, {}, clear=True):
            config = LLMConfig.from_env()

            assert config.api_key is None
            assert config.is_configured is False

    def test_app_config_from_env(self):
        """测试从环境变量创建完整应用配置"""
        with patch.dict(os.environ, {
            'APP_ENV': 'production',
            'DEBUG': 'True',
            'LOG_LEVEL': 'debug',
            'LLM_API_KEY': 'sk-test',
            'CHART_MAX_DECADES': '6',
        }):
            reset_env_config()
            config = AppConfig.from_env()

            assert config.env == 'production'
            assert config.debug is True
            assert config.log_level == 'DEBUG'
            assert config.chart.max_decades == 6
            assert config.llm.api_key == 'sk-test'

    def test_get_config_singleton(self):
        """测试配置单例模式"""
        config1 = get_config()
        config2 = get_config()

        assert config1 is config2

    def test_reload_config(self):
        """测试重新加载配置"""
        config1 = get_config()

        with patch.dict(os.environ, {'APP_ENV': 'staging'}):
            config2 = reload_config()

            assert config2.env == 'staging'
            # 重新加载后应该是新实例
            assert config2 is not config1


class TestEnvConfig:

    @pytest.mark.parametrize("value,expected", [
        ('dev', 'local'),
        ('prod', 'production'),
        ('stage', 'staging'),
        ('unknown', 'local'),
    ])
    def test_environment_aliases(self, value, expected):
        with patch.dict(os.environ, {'ENV': value}):
            assert EnvConfig().env == expected

    def test_required_missing_raises(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError):
                EnvConfig().get_config('SOME_REQUIRED_KEY', required=True)

    def test_bool_values(self):
        with patch.dict(os.environ, {'FLAG_A': 'yes', 'FLAG_B': 'off'}):
            config = EnvConfig()
            assert config.get_bool_config('FLAG_A') is True
            assert config.get_bool_config('FLAG_B', default=True) is False
            assert config.get_bool_config('FLAG_MISSING', default=True) is True
