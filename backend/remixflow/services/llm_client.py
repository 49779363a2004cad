import logging
import re

from openai import AsyncOpenAI

from remixflow.core.config import settings

logger = logging.getLogger(__name__)


def _strip_code_fences(text: str) -> str:
    if not text:
        return ""
    fenced = re.match(r"^\s*```[a-zA-Z0-9_-]*\s*([\s\S]*?)\s*```\s*$", text)
    if fenced:
        return fenced.group(1).strip()
    return text.strip()


class LLMClient:
    """Provider-agnostic client for text and image generation over an OpenAI-compatible API."""

    def __init__(
        self,
        model_name: str | None = None,
        image_model: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT
        self.image_model = image_model or settings.IMAGE_MODEL

        self.client = AsyncOpenAI(
            base_url=base_url or settings.LLM_BASE_URL,
            api_key=api_key or settings.LLM_API_KEY,
        )

    def _chat_completion_kwargs(self, *, temperature: float | None) -> dict:
        """Build provider/model-compatible kwargs for chat completions."""
        model_name = (self.model_name or "").lower()
        # GPT-5 family rejects non-default temperature values in some OpenAI endpoints.
        if model_name.startswith("gpt-5"):
            return {}
        if temperature is None:
            return {}
        return {"temperature": temperature}

    async def generate_text(
        self, user_prompt: str, *, system_prompt: str | None = None, temperature: float = 0.7
    ) -> str:
        """
        Generate plain text content for a single prompt.
        Retries once with a stricter instruction when the model returns nothing usable.
        """
        last_error: Exception | None = None
        base_messages = [{"role": "system", "content": system_prompt}] if system_prompt else []
        prompts = [
            user_prompt,
            f"{user_prompt}\n\nRespond with plain text only, no markdown fences.",
        ]
        for attempt_idx, prompt_attempt in enumerate(prompts, start=1):
            try:
                logger.info(
                    "Issuing text request to model %s (attempt %s/%s)...",
                    self.model_name,
                    attempt_idx,
                    len(prompts),
                )
                response = await self.client.chat.completions.create(
                    model=self.model_name,
                    messages=[*base_messages, {"role": "user", "content": prompt_attempt}],
                    **self._chat_completion_kwargs(
                        temperature=0 if attempt_idx > 1 else temperature
                    ),
                )
                if not getattr(response, "choices", None):
                    raise ValueError("Provider returned no output")
                text_response = _strip_code_fences(response.choices[0].message.content or "")
                if not text_response:
                    raise ValueError("Model returned empty content")
                logger.info(
                    "Successfully received text response from %s (attempt %s).",
                    self.model_name,
                    attempt_idx,
                )
                return text_response
            except Exception as e:
                last_error = e
                if attempt_idx < len(prompts):
                    logger.warning(
                        "Text generation failed for %s on attempt %s/%s: %s. Retrying...",
                        self.model_name,
                        attempt_idx,
                        len(prompts),
                        e,
                    )
                    continue
                logger.error("Error generating text response from %s: %s", self.model_name, e)
                raise

        if last_error:
            raise last_error
        raise RuntimeError("Text generation failed without a captured error")

    async def generate_image(self, prompt: str, *, size: str | None = None) -> str:
        """Generate a single image and return its hosted URL."""
        logger.info("Issuing image request to model %s...", self.image_model)
        response = await self.client.images.generate(
            model=self.image_model,
            prompt=prompt,
            n=1,
            size=size or settings.IMAGE_SIZE,
        )
        if not getattr(response, "data", None):
            logger.error("Received no image data from %s: %s", self.image_model, response)
            raise ValueError(f"Provider {self.image_model} returned no image.")
        image_url = response.data[0].url
        if not image_url:
            raise ValueError(f"Provider {self.image_model} returned an image without a URL.")
        return image_url
