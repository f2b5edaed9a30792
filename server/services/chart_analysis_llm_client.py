#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命盘分析 LLM 客户端（OpenAI 兼容 chat/completions 接口）

职责：
- 将命盘整理为精简的提示词上下文
- 一次请求返回完整分析，或以 SSE 流式返回
- 不做重试；任何失败都转成用户可见的失败提示，不影响排盘流程
"""

import json
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

import requests

from server.config.app_config import LLMConfig, get_config
from server.models.astrolabe import AstrolabeModel

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = "你是一位精通紫微斗数与八字命理的大师。"
ANALYSIS_FAILED_MESSAGE = "AI 分析失败，请稍后再试。"
EMPTY_RESULT_MESSAGE = "无法生成分析结果。"

ANALYSIS_USER_PROMPT_TEMPLATE = """
{context}

请结合用户的紫微斗数命盘与八字排盘数据，提供一份专业、详尽且富有洞察力的中文命理分析。

请按以下 Markdown 格式组织回复：
1. **命局总纲 (Overall Destiny)**: 结合紫微命宫/身宫与八字日主强弱进行综合分析。
2. **事业与财运 (Career & Wealth)**: 基于紫微（官禄、财帛）与八字（正偏财、官杀）的象义进行分析。
3. **情感与人际 (Relationships)**: 基于紫微（夫妻、交友）与八字（夫妻宫、配偶星）进行分析。
4. **流年运势 (Current Luck)**: 如果有流年数据，简单提点近期运势。
5. **造命建议 (Advice)**: 给命主的关键建议，发挥优势，规避弱点。

语气请保持专业、玄妙但又不失落地，多用鼓励性的语言。请务必使用中文回答。
"""


def build_prompt_context(astrolabe: AstrolabeModel) -> str:
    """命盘摘要（控制 token 数量）"""
    lines = [
        'Analyze this Zi Wei Dou Shu (Purple Star Astrology) and BaZi (Eight Characters) chart.',
        f"User: {astrolabe.gender}, Five Elements Class: {astrolabe.five_elements_class}.",
        'BaZi Chart:',
    ]
    bazi = astrolabe.bazi
    for pillar in bazi.pillars:
        tag = f"Day Master: {bazi.day_master}" if pillar.pillar_type == 'day' else pillar.gan.shishen
        lines.append(f"  {pillar.pillar_type.capitalize()}: {pillar.ganzhi} ({tag})")
    strength = bazi.day_master_strength
    lines.append(f"  Day Master Strength (simplified): {strength.level}")
    if bazi.da_yun:
        lines.append('  Da Yun: ' + ', '.join(f"{d.ganzhi}({d.start_age}-{d.end_age})" for d in bazi.da_yun))

    lines += ['', 'Zi Wei Dou Shu Chart:']
    for palace in astrolabe.palaces:
        majors = ', '.join(f"{s.name}({s.brightness})" if s.brightness else s.name for s in palace.major_stars)
        minors = ', '.join(s.name for s in palace.minor_stars)
        lines.append(f"Palace: {palace.name} ({palace.heavenly_stem}{palace.earthly_branch})")
        lines.append(f"  Major Stars: {majors}")
        lines.append(f"  Minor Stars: {minors}")
        if palace.is_body_palace:
            lines.append('  [Body Palace]')
        if palace.is_original_palace:
            lines.append('  [Life Palace]')

    horoscope = astrolabe.horoscope
    if horoscope is not None:
        lines.append('')
        lines.append(f"Flow Year: {horoscope.year.heavenly_stem}{horoscope.year.earthly_branch} "
                     f"(focus date {horoscope.solar_date})")
        if horoscope.year_sihua:
            sihua = horoscope.year_sihua
            lines.append(f"  Year Si Hua: 禄-{sihua.lu}, 权-{sihua.quan}, 科-{sihua.ke}, 忌-{sihua.ji}")

    return '\n'.join(lines) + '\n'


class ChartAnalysisLLMClient:
    """命盘分析客户端"""

    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or get_config().llm

    @property
    def chat_url(self) -> str:
        return f"{self.config.api_base.rstrip('/')}/chat/completions"

    def _headers(self, stream: bool) -> Dict[str, str]:
        headers = {
            'Authorization': f'Bearer {self.config.api_key}',
            'Content-Type': 'application/json',
        }
        if stream:
            headers['Accept'] = 'text/event-stream'
        return headers

    def build_messages(self, astrolabe: AstrolabeModel) -> List[Dict[str, str]]:
        user_prompt = ANALYSIS_USER_PROMPT_TEMPLATE.format(context=build_prompt_context(astrolabe))
        return [
            {'role': 'system', 'content': ANALYSIS_SYSTEM_PROMPT},
            {'role': 'user', 'content': user_prompt},
        ]

    def _payload(self, astrolabe: AstrolabeModel, stream: bool) -> Dict[str, Any]:
        return {
            'model': self.config.model,
            'temperature': self.config.temperature,
            'stream': stream,
            'messages': self.build_messages(astrolabe),
        }

    def analyze(self, astrolabe: AstrolabeModel) -> str:
        """
        一次请求返回完整分析

        Returns:
            str: 分析文本；失败时返回 ANALYSIS_FAILED_MESSAGE
        """
        if not self.config.is_configured:
            logger.error("LLM_API_KEY 未设置，无法进行命盘分析")
            return ANALYSIS_FAILED_MESSAGE

        try:
            response = requests.post(
                self.chat_url,
                headers=self._headers(stream=False),
                json=self._payload(astrolabe, stream=False),
                timeout=self.config.timeout,
            )
            if response.status_code != 200:
                logger.error(f"命盘分析请求失败: HTTP {response.status_code}: {response.text[:200]}")
                return ANALYSIS_FAILED_MESSAGE
            data = response.json()
            content = (data['choices'][0]['message'].get('content') or '').strip()
            return content or EMPTY_RESULT_MESSAGE
        except requests.exceptions.Timeout:
            logger.error(f"命盘分析请求超时（{self.config.timeout}秒）")
            return ANALYSIS_FAILED_MESSAGE
        except requests.exceptions.RequestException as e:
            logger.error(f"命盘分析请求异常: {e}")
            return ANALYSIS_FAILED_MESSAGE
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"命盘分析响应解析失败: {e}")
            return ANALYSIS_FAILED_MESSAGE

    def analyze_stream(self, astrolabe: AstrolabeModel) -> Iterator[Dict[str, Any]]:
        """
        流式分析

        Yields:
            {
                'type': 'start' | 'chunk' | 'reasoning' | 'end' | 'error',
                'content': str,  # chunk/reasoning 时为文本片段
                'error': str  # error 时为用户可见的失败提示
            }
        """
        if not self.config.is_configured:
            logger.error("LLM_API_KEY 未设置，无法进行命盘分析")
            yield {'type': 'error', 'content': '', 'error': ANALYSIS_FAILED_MESSAGE}
            return

        yield {'type': 'start', 'content': '', 'error': None}

        try:
            response = requests.post(
                self.chat_url,
                headers=self._headers(stream=True),
                json=self._payload(astrolabe, stream=True),
                stream=True,
                timeout=self.config.timeout,
            )
            logger.info(f"命盘分析流式响应: HTTP {response.status_code}")

            if response.status_code != 200:
                logger.error(f"命盘分析请求失败: HTTP {response.status_code}: {response.text[:200]}")
                yield {'type': 'error', 'content': '', 'error': ANALYSIS_FAILED_MESSAGE}
                return

            response.encoding = 'utf-8'

            # 逐行读取 SSE 数据，保留不完整的最后一行
            buffer = ""
            for chunk in response.iter_content(chunk_size=8192, decode_unicode=True):
                if not chunk:
                    continue
                buffer += chunk
                lines = buffer.split('\n')
                buffer = lines[-1]

                for line in lines[:-1]:
                    line = line.strip()
                    if not line.startswith('data:'):
                        continue
                    data_str = line[5:].strip()
                    if data_str == '[DONE]':
                        yield {'type': 'end', 'content': '', 'error': None}
                        return

                    try:
                        data = json.loads(data_str)
                    except json.JSONDecodeError as e:
                        logger.error(f"解析SSE数据失败: {e}, 原始数据: {data_str[:200]}")
                        yield {'type': 'error', 'content': '', 'error': ANALYSIS_FAILED_MESSAGE}
                        return

                    if not isinstance(data, dict):
                        logger.error(f"SSE数据不是 JSON 对象: {data_str[:200]}")
                        yield {'type': 'error', 'content': '', 'error': ANALYSIS_FAILED_MESSAGE}
                        return

                    for choice in data.get('choices') or []:
                        delta = choice.get('delta') or {}
                        if delta.get('reasoning_content'):
                            yield {'type': 'reasoning', 'content': delta['reasoning_content'], 'error': None}
                        if delta.get('content'):
                            yield {'type': 'chunk', 'content': delta['content'], 'error': None}

            # 服务端未发送 [DONE] 也视为正常结束
            yield {'type': 'end', 'content': '', 'error': None}

        except requests.exceptions.Timeout:
            logger.error(f"命盘分析流式请求超时（{self.config.timeout}秒）")
            yield {'type': 'error', 'content': '', 'error': ANALYSIS_FAILED_MESSAGE}
        except requests.exceptions.RequestException as e:
            logger.error(f"命盘分析流式请求异常: {e}")
            yield {'type': 'error', 'content': '', 'error': ANALYSIS_FAILED_MESSAGE}

    def stream_with_callbacks(self, astrolabe: AstrolabeModel,
                              on_token: Callable[[str], None],
                              on_reasoning_token: Optional[Callable[[str], None]] = None) -> str:
        """
        流式分析，逐段回调

        Returns:
            str: 拼接后的完整正文；失败时返回 ANALYSIS_FAILED_MESSAGE
        """
        parts = []
        for item in self.analyze_stream(astrolabe):
            if item['type'] == 'chunk':
                parts.append(item['content'])
                on_token(item['content'])
            elif item['type'] == 'reasoning' and on_reasoning_token is not None:
                on_reasoning_token(item['content'])
            elif item['type'] == 'error':
                return item['error']
        return ''.join(parts)
