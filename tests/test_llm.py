from types import SimpleNamespace

import pytest

from rag_services.llm import NO_ANSWER, LLMService


class FakeCompletions:
    def __init__(self, response):
        self.response = response
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        return self.response


def make_llm(response, **kwargs):
    completions = FakeCompletions(response)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return LLMService(model="gemini-2.0-flash", client=client, **kwargs), completions


def reply(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def test_build_messages_orders_system_history_question():
    history = [{"user": "Name?", "assistant": "Jane Doe."}]

    messages = LLMService.build_messages("Skills?", "Python, SQL", history)

    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[0]["content"].startswith("You are a resume analysis expert.")
    assert messages[0]["content"].endswith("Context: Python, SQL")
    assert NO_ANSWER in messages[0]["content"]
    assert messages[1]["content"] == "Name?"
    assert messages[2]["content"] == "Jane Doe."
    assert messages[3]["content"] == "Skills?"


def test_generate_answer_sends_model_and_temperature():
    llm, completions = make_llm(reply("  Python and SQL.  "), temperature=0.2)

    answer = llm.generate_answer("Skills?", "Python, SQL", [])

    assert answer == "Python and SQL."
    assert completions.kwargs["model"] == "gemini-2.0-flash"
    assert completions.kwargs["temperature"] == 0.2
    assert "max_tokens" not in completions.kwargs


def test_generate_answer_passes_max_tokens_when_set():
    llm, completions = make_llm(reply("ok"), max_tokens=256)

    llm.generate_answer("q", "c", [])

    assert completions.kwargs["max_tokens"] == 256


@pytest.mark.parametrize("response", [None, SimpleNamespace(choices=[]), reply(None)])
def test_generate_answer_empty_reply_returns_blank(response):
    llm, _ = make_llm(response)

    assert llm.generate_answer("q", "c", []) == ""


def test_missing_api_key_raises_runtime_error():
    llm = LLMService(api_key="")

    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        llm.generate_answer("q", "c", [])
