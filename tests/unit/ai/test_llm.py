from unittest.mock import MagicMock, patch

from sprintpilot.ai.llm import OpenAIProvider


def _response(content):
    message = MagicMock(content=content)
    return MagicMock(choices=[MagicMock(message=message)])


def test_configured_flag():
    assert OpenAIProvider(api_key="").configured is False
    assert OpenAIProvider(api_key="sk-test").configured is True


@patch("sprintpilot.ai.llm.OpenAI")
def test_generate_text(mock_openai):
    client = mock_openai.return_value
    client.chat.completions.create.return_value = _response("Summary")

    provider = OpenAIProvider(api_key="sk-test", model="gpt-4o-mini", temperature=0.2)
    result = provider.generate("Describe the sprint")

    assert result == "Summary"
    mock_openai.assert_called_once_with(api_key="sk-test")
    client.chat.completions.create.assert_called_once_with(
        model="gpt-4o-mini",
        messages=[{"role": "user", "content": "Describe the sprint"}],
        temperature=0.2,
    )


def test_generate_json(mocker):
    mock_openai = mocker.patch("sprintpilot.ai.llm.OpenAI")
    client = mock_openai.return_value
    client.chat.completions.create.return_value = _response(None)

    result = OpenAIProvider(api_key="sk-test").generate("Invite", json_output=True)

    assert result == ""
    kwargs = client.chat.completions.create.call_args[1]
    assert kwargs["response_format"] == {"type": "json_object"}
