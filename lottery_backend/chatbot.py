from __future__ import annotations

import os
import sqlite3
from typing import Any, Dict, List

from lottery_backend.config import get_chat_mode, get_anthropic_model
from lottery_backend.db import get_past_results, get_predictions, get_patterns

ODDS_TEXT = (
    "The odds of matching all 7 numbers in a typical lottery are approximately 1 in 85,900,584. "
    "For matching 6 numbers, the odds improve to about 1 in 1,221,759. Remember that each draw "
    "is independent, and past results don't influence future outcomes."
)

NO_PATTERNS_TEXT = (
    "We haven't detected any significant patterns yet. This could be due to insufficient data "
    "or the random nature of lottery draws. As more results are added, our pattern detection "
    "algorithms will have more data to analyze."
)

STRATEGY_TEXT = (
    "Here are some lottery playing strategies to consider:\n\n"
    "1. Set a budget and stick to it\n"
    "2. Consider playing less popular games with better odds\n"
    "3. Join or form a lottery pool to increase your chances while sharing the cost\n"
    "4. Use a combination of both hot (frequently drawn) and cold (rarely drawn) numbers\n"
    "5. Avoid number sequences like 1,2,3,4,5,6,7\n\n"
    "Remember that lottery is primarily a game of chance, and no strategy can guarantee a win."
)

NO_RESULTS_TEXT = (
    "There are no past results in our database yet. You can add past lottery results "
    "using the 'Enter Past Lottery Results' form."
)

DEFAULT_TEXT = (
    "I'm your lottery prediction assistant. I can help with information about lottery odds, "
    "patterns in past results, and prediction strategies. What would you like to know about "
    "lottery predictions?"
)

DATA_ERROR_TEXT = "I'm sorry, I'm having trouble accessing the lottery data right now. Please try again later."

LLM_FALLBACK_TEXT = (
    "I apologize, but I'm currently unable to answer your question. This could be due to API key "
    "configuration or service availability.\n\n"
    "For now, here are some general lottery tips:\n"
    "- The odds of winning major lotteries are very low (typically millions to one)\n"
    "- Past results don't influence future draws in truly random lotteries\n"
    "- Consistency in playing the same numbers doesn't change your odds\n"
    "- Consider the expected value when deciding whether to play"
)

SYSTEM_PROMPT = """You are a lottery prediction assistant. You help users understand lottery patterns,
odds, and provide informed insights about lottery predictions.
Use the context provided to answer the user's question.
If the question isn't related to lotteries, kindly redirect the conversation back to lottery-related topics.
Be informative but always remind users that lottery predictions cannot guarantee wins.
"""


def _pct(confidence: float) -> str:
    return f"{confidence * 100:.1f}%"


def build_context(
    past_results: List[Dict[str, Any]],
    predictions: List[Dict[str, Any]],
    patterns: List[Dict[str, Any]],
) -> str:
    context = "Based on the following lottery information:\n"

    if past_results:
        context += "\nPast Results:\n"
        for result in past_results:
            context += f"- Draw: {result['numbers']} with bonus {result['bonus_number']}\n"

    if predictions:
        context += "\nRecent Predictions:\n"
        for prediction in predictions:
            context += f"- {prediction['source']}: {prediction['numbers']} with bonus {prediction['bonus_number']}\n"

    if patterns:
        context += "\nDetected Patterns:\n"
        for pattern in patterns:
            context += f"- {pattern['pattern_description']} (confidence: {_pct(pattern['confidence'])})\n"

    return context


def generate_demo_response(message: str) -> str:
    """Canned answers chosen by keyword; no external calls."""
    try:
        past_results = get_past_results(limit=5)
        patterns = get_patterns(limit=3)
    except sqlite3.Error as e:
        print(f"[CHAT] Error reading context: {e}")
        return DATA_ERROR_TEXT

    lower = message.lower()

    if "odds" in lower or "chance" in lower:
        return ODDS_TEXT

    if "pattern" in lower or "trend" in lower:
        if not patterns:
            return NO_PATTERNS_TEXT
        response = "Based on our analysis of past results, we've detected these patterns:\n\n"
        for pattern in patterns:
            response += f"- {pattern['pattern_description']} (confidence: {_pct(pattern['confidence'])})\n"
        response += "\nRemember that lottery draws are random, and these patterns may be coincidental."
        return response

    if "strategy" in lower or "tip" in lower or "advice" in lower:
        return STRATEGY_TEXT

    if "result" in lower or "past draw" in lower:
        if not past_results:
            return NO_RESULTS_TEXT
        response = "Here are the most recent lottery results:\n\n"
        for index, result in enumerate(past_results, start=1):
            response += f"Draw {index}: {result['numbers']} with bonus {result['bonus_number']}\n"
        return response

    return DEFAULT_TEXT


def generate_llm_response(message: str) -> str:
    """
    Ask Claude, with recent results, predictions and patterns as context.
    Any failure (no SDK, no key, API error, empty reply) returns LLM_FALLBACK_TEXT.
    """
    try:
        import anthropic
    except ImportError:
        print("[CHAT] anthropic SDK not installed. Install with: pip install anthropic")
        return LLM_FALLBACK_TEXT

    api_key = os.getenv("ANTHROPIC_API_KEY", "").strip()
    if not api_key:
        print("[CHAT] ANTHROPIC_API_KEY not set; returning fallback answer")
        return LLM_FALLBACK_TEXT

    try:
        context = build_context(
            get_past_results(limit=5),
            get_predictions(limit=5),
            get_patterns(limit=3),
        )

        client = anthropic.Anthropic(api_key=api_key)
        reply = client.messages.create(
            model=get_anthropic_model(),
            max_tokens=500,
            system=SYSTEM_PROMPT + "\n" + context,
            messages=[{"role": "user", "content": message}],
        )

        text = "".join(
            block.text for block in reply.content if getattr(block, "type", "") == "text"
        ).strip()
        return text or "I apologize, but I was unable to generate a response. Please try again."

    except (anthropic.APIError, sqlite3.Error) as e:
        print(f"[CHAT] Error generating LLM response: {e}")
        return LLM_FALLBACK_TEXT


def generate_chat_response(message: str) -> str:
    if get_chat_mode() == "anthropic":
        return generate_llm_response(message)
    return generate_demo_response(message)
