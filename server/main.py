#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FastAPI 应用主入口
"""

import sys
import os
import json
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import Response


# 自定义UTF-8 JSONResponse类，确保中文正确编码 + 强制不缓存
class UTF8JSONResponse(Response):
    media_type = "application/json; charset=utf-8"

    def __init__(self, content, **kwargs):
        super().__init__(content, **kwargs)
        # 强制禁用所有缓存
        self.headers["Cache-Control"] = "no-cache, no-store, must-revalidate, max-age=0"
        self.headers["Pragma"] = "no-cache"
        self.headers["Expires"] = "0"

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,  # 关键：不转义非ASCII字符
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# 优先加载 .env 文件（必须在读取配置之前）
from dotenv import load_dotenv

env_path = os.path.join(project_root, '.env')
if os.path.exists(env_path):
    load_dotenv(env_path, override=True)
    print(f"✓ 已加载环境变量文件: {env_path}")

from server.config.app_config import get_config
from server.config.env_config import get_env_config

config = get_config()

# 配置日志（必须在导入路由之前初始化）
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

if not config.llm.is_configured:
    logger.warning("LLM_API_KEY 未设置，AI 分析接口将返回失败提示")

from server.api.v1.chart import router as chart_router

app = FastAPI(
    title="Ziwei BaZi Chart API",
    description="紫微斗数与八字排盘API服务",
    version="1.0.0",
    debug=config.debug,
    default_response_class=UTF8JSONResponse  # 使用UTF-8编码的JSON响应
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(chart_router, prefix="/api/v1", tags=["排盘"])


@app.get("/health")
async def health_check():
    """健康检查"""
    return {
        "status": "healthy",
        "env": config.env,
        "llm_configured": config.llm.is_configured,
    }


# 健康检查别名（部署脚本使用）
@app.get("/api/v1/health")
async def health_check_api():
    """健康检查 API 别名"""
    return await health_check()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "server.main:app",
        host="0.0.0.0",
        port=8001,
        reload=get_env_config().is_local_dev,
        workers=1  # 开发环境使用1个worker，生产环境可以增加
    )
