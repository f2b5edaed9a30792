#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一应用配置管理
所有配置统一从这里读取，避免配置分散
"""

from typing import Optional
from dataclasses import dataclass

# 使用统一环境配置
from server.config.env_config import get_env_config, reset_env_config


@dataclass
class ChartConfig:
    """排盘配置"""
    default_longitude: float = 120.0
    language: str = 'zh-CN'
    fix_leap: bool = True
    max_decades: int = 10
    max_start_age: int = 110
    jie_search_retries: int = 5

    @classmethod
    def from_env(cls) -> 'ChartConfig':
        """从环境变量创建配置"""
        env_config = get_env_config()
        return cls(
            default_longitude=env_config.get_float_config('CHART_DEFAULT_LONGITUDE', 120.0),
            language=env_config.get_config('CHART_LANGUAGE', default='zh-CN'),
            fix_leap=env_config.get_bool_config('CHART_FIX_LEAP', default=True),
            max_decades=env_config.get_int_config('CHART_MAX_DECADES', 10),
            max_start_age=env_config.get_int_config('CHART_MAX_START_AGE', 110),
            jie_search_retries=env_config.get_int_config('CHART_JIE_SEARCH_RETRIES', 5),
        )


@dataclass
class LLMConfig:
    """命理分析 LLM 配置（OpenAI 兼容接口）"""
    api_base: str = 'https://api.deepseek.com/v1'
    api_key: Optional[str] = None
    model: str = 'deepseek-reasoner'
    temperature: float = 0.7
    timeout: int = 60

    @classmethod
    def from_env(cls) -> 'LLMConfig':
        env_config = get_env_config()
        return cls(
            api_base=env_config.get_config('LLM_API_BASE', default='https://api.deepseek.com/v1').rstrip('/'),
            api_key=env_config.get_config('LLM_API_KEY'),
            model=env_config.get_config('LLM_MODEL', default='deepseek-reasoner'),
            temperature=env_config.get_float_config('LLM_TEMPERATURE', 0.7),
            timeout=env_config.get_int_config('LLM_TIMEOUT', 60),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class AppConfig:
    """应用配置"""
    env: str = 'local'
    debug: bool = False
    log_level: str = 'INFO'

    # 子配置
    chart: ChartConfig = None
    llm: LLMConfig = None

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """从环境变量创建完整配置"""
        env_config = get_env_config()
        config = cls(
            env=env_config.env,
            debug=env_config.get_bool_config('DEBUG', default=False),
            log_level=env_config.get_config('LOG_LEVEL', default='INFO').upper(),
        )

        # 加载子配置
        config.chart = ChartConfig.from_env()
        config.llm = LLMConfig.from_env()

        return config


# 全局配置实例（单例模式）
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置实例（单例）"""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reload_config() -> AppConfig:
    """重新加载配置（环境变量变化后调用）"""
    global _config
    reset_env_config()
    _config = AppConfig.from_env()
    return _config
