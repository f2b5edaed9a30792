# -*- coding: utf-8 -*-
"""
配置模块
"""

from .app_config import AppConfig, ChartConfig, LLMConfig, get_config, reload_config
from .env_config import get_env_config

__all__ = ['AppConfig', 'ChartConfig', 'LLMConfig', 'get_config', 'reload_config', 'get_env_config']
