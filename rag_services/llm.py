"""
LLM service for answer generation
"""
from openai import OpenAI
from typing import List, Dict, Optional

NO_ANSWER = "I could not find the answer in the provided document."

SYSTEM_INSTRUCTION = f"""You are a resume analysis expert.
You will be given a context from the resume and a user question.
Answer ONLY based on this context.
If no answer, say: "{NO_ANSWER}".

Context: {{context}}"""


class LLMService:
    """Handles answer generation using the hosted chat model."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: str = "",
        base_url: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
        client=None,
    ):
        self._client = client
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise RuntimeError(
                    "Chat client could not be initialized. "
                    "Set the GEMINI_API_KEY environment variable."
                )
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def generate_answer(self, question: str, context: str, history: List[Dict]) -> str:
        """Generate an answer using the context and conversation history."""
        params = {
            "model": self.model,
            "messages": self.build_messages(question, context, history),
            "temperature": self.temperature,
        }
        if self.max_tokens:
            params["max_tokens"] = self.max_tokens

        response = self.client.chat.completions.create(**params)

        if not response or not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()

    @staticmethod
    def build_messages(question: str, context: str, history: List[Dict]) -> List[Dict]:
        """System instruction with context, previous turns, then the question."""
        messages = [{"role": "system", "content": SYSTEM_INSTRUCTION.format(context=context)}]
        for h in history:
            messages.append({"role": "user", "content": h["user"]})
            messages.append({"role": "assistant", "content": h["assistant"]})
        messages.append({"role": "user", "content": question})
        return messages
