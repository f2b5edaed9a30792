#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排盘模块共享日志工具

提供安全的日志输出函数，捕获 Broken pipe 等异常。
降级路径（历法回退、起运回退、节令查找失败、神煞/关系失败）统一经此输出 warning。
"""

import logging
import os


class SafeStreamHandler(logging.StreamHandler):
    """安全的 StreamHandler，捕获 Broken pipe 异常"""
    def emit(self, record):
        try:
            super().emit(record)
        except (BrokenPipeError, OSError):
            pass


logger = logging.getLogger("core.calculators.bazi_calculator")
if not logger.handlers:
    handler = SafeStreamHandler()
    handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    logger.addHandler(handler)
    logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())

_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


def safe_log(level, message):
    """
    安全的日志输出函数

    在 Web 服务环境中，客户端断开连接时可能触发 Broken pipe 错误
    """
    try:
        logger.log(_LEVELS.get(level, logging.INFO), message)
    except (BrokenPipeError, OSError):
        pass
