from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from remixflow.services.llm_client import LLMClient


def _chat_response(content):
    mock_message = MagicMock()
    mock_message.content = content

    mock_choice = MagicMock()
    mock_choice.message = mock_message

    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


def _mock_openai(completions_create=None, images_generate=None):
    mock_completions = MagicMock()
    mock_completions.create = completions_create or AsyncMock()

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_images = MagicMock()
    mock_images.generate = images_generate or AsyncMock()

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat
    mock_client_instance.images = mock_images
    return mock_client_instance


@pytest.mark.asyncio
async def test_generate_text_returns_stripped_content():
    create = AsyncMock(return_value=_chat_response("```\nHola, mundo\n```"))
    mock_client_instance = _mock_openai(completions_create=create)

    with patch("remixflow.services.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(model_name="test-model", api_key="dummy_key")
        result = await client.generate_text("Translate this")

    assert result == "Hola, mundo"
    create.assert_called_once()
    assert create.call_args.kwargs["model"] == "test-model"
    assert create.call_args.kwargs["messages"][-1] == {"role": "user", "content": "Translate this"}


@pytest.mark.asyncio
async def test_generate_text_retries_once_on_empty_content():
    create = AsyncMock(side_effect=[_chat_response(""), _chat_response("Second try")])
    mock_client_instance = _mock_openai(completions_create=create)

    with patch("remixflow.services.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(model_name="test-model", api_key="dummy_key")
        result = await client.generate_text("Describe the remix")

    assert result == "Second try"
    assert create.call_count == 2
    assert create.call_args.kwargs["temperature"] == 0


@pytest.mark.asyncio
async def test_generate_text_raises_after_second_failure():
    create = AsyncMock(side_effect=RuntimeError("provider down"))
    mock_client_instance = _mock_openai(completions_create=create)

    with patch("remixflow.services.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(model_name="test-model", api_key="dummy_key")
        with pytest.raises(RuntimeError, match="provider down"):
            await client.generate_text("Describe the remix")

    assert create.call_count == 2


@pytest.mark.asyncio
async def test_generate_image_returns_url():
    image = MagicMock()
    image.url = "https://images.example/frame.png"
    images_response = MagicMock()
    images_response.data = [image]
    generate = AsyncMock(return_value=images_response)
    mock_client_instance = _mock_openai(images_generate=generate)

    with patch("remixflow.services.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(image_model="test-image-model", api_key="dummy_key")
        url = await client.generate_image("A cinematic frame")

    assert url == "https://images.example/frame.png"
    assert generate.call_args.kwargs["model"] == "test-image-model"
    assert generate.call_args.kwargs["n"] == 1


@pytest.mark.asyncio
async def test_generate_image_without_data_raises():
    images_response = MagicMock()
    images_response.data = []
    mock_client_instance = _mock_openai(images_generate=AsyncMock(return_value=images_response))

    with patch("remixflow.services.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(api_key="dummy_key")
        with pytest.raises(ValueError):
            await client.generate_image("A cinematic frame")
