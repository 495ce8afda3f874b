"""Gemini structured-generation client (JSON output constrained by a schema)."""

from google import genai
from google.genai import types


class GeminiClient:
    """Client for schema-constrained JSON generation via Google's Gemini models."""

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", timeout: float | None = 60):
        http_options = None
        if timeout:
            # google-genai takes the request timeout in milliseconds
            http_options = types.HttpOptions(timeout=int(timeout * 1000))
        self.client = genai.Client(api_key=api_key, http_options=http_options)
        self.model = model

    def generate_json(
        self,
        prompt: str,
        schema: types.Schema,
        temperature: float = 0.1,
    ) -> str:
        """
        Generate a JSON completion conforming to a response schema.

        Args:
            prompt: Full instruction text
            schema: Required output schema
            temperature: Sampling temperature (higher = more creative)

        Returns:
            Raw response text (a JSON document, possibly empty)
        """
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
                temperature=temperature,
            ),
        )
        return response.text or ""
