# pure360/chat_logic.py

from __future__ import annotations
from typing import Dict, Any, Iterator, List, Optional
import logging

import openai
from openai import OpenAI

from pure360.config import LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are Pure360's friendly AI assistant. Pure360 offers professional home and care services in Cape Town, South Africa.

SERVICES OFFERED:
1. **Cleaning Services** - Professional home cleaning with flexible packages:
   - Regular cleaning (weekly/bi-weekly)
   - Deep cleaning (spring cleaning, move-in/out)
   - AirBnB turnover cleaning
   - Pricing starts at R300 for up to 2 bedrooms and 1 bathroom, plus R80 per extra hour

2. **Removals** - Reliable moving services:
   - Furniture moving
   - Rubble removal
   - Custom quotes based on pickup/dropoff locations

3. **Care Services** - Compassionate care for loved ones:
   - Elderly companion care
   - Professional nursing services
   - Flexible scheduling options

CONTACT INFORMATION:
- Phone: 076 400 2332
- WhatsApp: 076 400 2332
- Email: pure360s@gmail.com

BOOKING PROCESS:
1. Users can book cleaning directly on the website
2. For removals and care services, users submit a quote request
3. The team responds within 24 hours

IMPORTANT GUIDELINES:
- Be helpful, friendly, and professional
- If you can't answer a question, suggest contacting via WhatsApp or phone
- For complex inquiries, offer to connect them with a human via WhatsApp
- Keep responses concise and helpful
- If someone needs urgent help, always recommend calling or WhatsApp"""

SIGN_IN_MESSAGE = "Please sign in to chat with our assistant, or reach us on WhatsApp at 076 400 2332."
RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again in a moment."
PAYMENT_REQUIRED_MESSAGE = "Service temporarily unavailable. Please contact us via WhatsApp at 076 400 2332."
GENERIC_ERROR_MESSAGE = "AI service error. Please try again or contact us via WhatsApp."

WELCOME_MESSAGE = "👋 Hi! Ask me about our cleaning, removals or care services."


class ChatUnavailable(Exception):
    """Upstream refused or failed; `str(e)` is the text to show the user."""


# ----------------- HISTORY ------------------------

def store_message(history: List[Dict[str, Any]], role: str, content: str, max_messages: int = 25) -> None:
    history.append({"role": role, "content": content})
    if len(history) > max_messages:
        del history[: len(history) - max_messages]


def build_messages(history: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    messages = [{"role": "system", "content": SYSTEM_PROMPT}]
    messages.extend(
        {"role": m["role"], "content": m["content"]}
        for m in history
        if m["role"] in ("user", "assistant")
    )
    return messages


# ----------------- STREAMING ------------------------

def fallback_message(status_code: Optional[int]) -> str:
    if status_code == 429:
        return RATE_LIMITED_MESSAGE
    if status_code == 402:
        return PAYMENT_REQUIRED_MESSAGE
    return GENERIC_ERROR_MESSAGE


def _get_client(cfg: LLMConfig) -> OpenAI:
    return OpenAI(api_key=cfg.api_key, base_url=cfg.base_url)


def stream_reply(
    cfg: LLMConfig,
    history: List[Dict[str, Any]],
    token: Optional[str],
    client: Optional[OpenAI] = None,
) -> Iterator[str]:
    """
    Yield reply tokens as the gateway streams them.

    Needs the visitor's session token; without one nothing is sent upstream.
    Raises ChatUnavailable with the user-facing text when the gateway refuses.
    """
    if not token:
        raise ChatUnavailable(SIGN_IN_MESSAGE)

    client = client or _get_client(cfg)
    try:
        stream = client.chat.completions.create(
            model=cfg.model,
            messages=build_messages(history),
            stream=True,
        )
        for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content
    except openai.APIStatusError as e:
        logger.error("AI gateway error: %s %s", e.status_code, e.message)
        raise ChatUnavailable(fallback_message(e.status_code)) from e
    except openai.APIError as e:
        logger.error("AI gateway unreachable: %s", e)
        raise ChatUnavailable(GENERIC_ERROR_MESSAGE) from e
