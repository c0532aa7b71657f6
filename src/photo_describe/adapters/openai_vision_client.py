"""OpenAI chat-completions client for image descriptions."""

from dataclasses import dataclass

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from photo_describe.domain.errors import VisionRequestError
from photo_describe.services.vision import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by the OpenAI chat-completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float | None = None) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        if timeout is None:
            return cls(client=AsyncOpenAI(api_key=api_key))
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

    async def describe(
        self,
        *,
        model: str,
        max_tokens: int,
        image_data_url: str,
        prompt: str,
    ) -> str | None:
        """Send one image and prompt, returning the completion text."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_data_url}},
                        ],
                    }
                ],
                max_tokens=max_tokens,
            )
        except APITimeoutError as exc:
            raise VisionRequestError(str(exc), timed_out=True) from exc
        except APIStatusError as exc:
            raise VisionRequestError(
                exc.message, status_code=exc.status_code, code=exc.code
            ) from exc
        except APIConnectionError as exc:
            raise VisionRequestError(str(exc)) from exc

        if not response.choices:
            return None
        return response.choices[0].message.content
