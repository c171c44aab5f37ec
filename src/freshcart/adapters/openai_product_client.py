"""OpenAI Responses API client for product identification."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from freshcart.services.products import ProductClient


@dataclass
class OpenAIProductClient(ProductClient):
    """Product client backed by OpenAI structured outputs."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIProductClient":
        """Create an OpenAI product client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def identify(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Call the Responses API and decode the JSON output."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append(
                {"type": "input_image", "image_url": image_data_url, "detail": "high"}
            )
        response = await self.client.responses.create(
            model=model,
            instructions=(
                "You are a grocery product identification expert. "
                "Be specific about brands and product names when visible."
            ),
            input=[{"role": "user", "content": content}],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "product_extract",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()
