from openai import OpenAI

SYSTEM_PROMPT = "You are BORTtheBOT, a concise helpful assistant."

def create_llm_client(api_key: str) -> OpenAI:
    return OpenAI(api_key=api_key)

def complete_chat(client: OpenAI, message: str, model: str = "gpt-4o-mini", temperature: float = 0.6) -> str | None:
    """
    Ask the language model for a reply to a single user message.

    Args:
        client: OpenAI client
        message: User message, already trimmed
        model: Chat completion model name
        temperature: Sampling temperature

    Returns:
        Reply text, None if the model returned no content

    Raises:
        openai.OpenAIError: If the request fails
    """
    response = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": message},
        ],
        temperature=temperature,
    )
    if not response.choices:
        return None
    return response.choices[0].message.content
