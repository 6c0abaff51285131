from datetime import datetime
from typing import Callable

from loguru import logger
from openai import OpenAI

from bort.modules import llm

EMPTY_MESSAGE_REPLY = "Say something to BORT!"
NO_CONTENT_REPLY = "I'm not sure how to respond to that."

HELP_TEXT = (
    "Commands: help, time, date, echo <text>, upper <text>, lower <text>, reverse <text>. "
    "Anything else is echoed back."
)

TEXT_COMMANDS: dict[str, Callable[[str], str]] = {
    "echo": lambda text: text,
    "upper": lambda text: text.upper(),
    "lower": lambda text: text.lower(),
    "reverse": lambda text: text[::-1],
}

def local_reply(message: str, now: datetime | None = None) -> str:
    """
    Rule-based reply used when no language model is configured or it fails.

    Args:
        message: Trimmed, non-empty user message
        now: Clock override for the time and date commands

    Returns:
        Reply text
    """
    command, _, argument = message.partition(" ")
    command = command.lower()
    argument = argument.strip()

    if command == "help" and not argument:
        return HELP_TEXT
    if command == "time" and not argument:
        return (now or datetime.now()).strftime("%H:%M:%S")
    if command == "date" and not argument:
        return (now or datetime.now()).strftime("%Y-%m-%d")
    if command in TEXT_COMMANDS and argument:
        return TEXT_COMMANDS[command](argument)

    return f'BORT heard: "{message}"'

def generate_reply(message: str, client: OpenAI | None = None, model: str = "gpt-4o-mini") -> str:
    trimmed = message.strip()
    if not trimmed:
        return EMPTY_MESSAGE_REPLY

    if client is None:
        return local_reply(trimmed)

    try:
        content = llm.complete_chat(client, trimmed, model=model)
    except Exception as e:
        logger.warning(f"[CHAT] Language model call failed, using local reply: {e}")
        return local_reply(trimmed)

    return content if content else NO_CONTENT_REPLY
