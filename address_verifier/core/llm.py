"""OpenAI / Azure OpenAI clients that turn an address line into JSON text."""
from typing import Optional, Protocol

from openai import AzureOpenAI, OpenAI

from address_verifier.core import config
from address_verifier.core.models import PARSED_FIELDS

SYSTEM_PROMPT = (
    "You parse US addresses into JSON. Return ONLY valid JSON with these fields: "
    "number (street number), prefix (N/S/E/W), name (street name), type (St/Ave/Blvd/etc), "
    "suffix (NE/SW/etc), city, state (2-letter), postal (ZIP code). "
    "Use empty strings for missing fields."
)

ADDRESS_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {name: {"type": "string"} for name in PARSED_FIELDS},
    "required": list(PARSED_FIELDS),
}


class AddressModel(Protocol):
    """Anything that can turn one address line into raw model text."""

    def complete(self, line: str) -> str:
        ...


class OpenAIChatAddressModel:
    """Chat completion in JSON mode."""

    def __init__(self, client, model: str):
        self.client = client
        self.model = model

    def complete(self, line: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": line},
            ],
            temperature=0.0,
            response_format={"type": "json_object"},
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class OpenAIStructuredAddressModel:
    """Responses API with a strict JSON schema (structured output)."""

    def __init__(self, client, model: str):
        self.client = client
        self.model = model

    def complete(self, line: str) -> str:
        response = self.client.responses.create(
            model=self.model,
            instructions=SYSTEM_PROMPT,
            input=f"Line: {line}",
            text={
                "format": {
                    "type": "json_schema",
                    "name": "AddressFields",
                    "schema": ADDRESS_SCHEMA,
                    "strict": True,
                }
            },
            temperature=0,
        )
        return getattr(response, "output_text", "") or ""


def build_address_model(
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    mode: Optional[str] = None,
    azure_endpoint: Optional[str] = None
) -> Optional[AddressModel]:
    """
    Build the configured language model client.

    Azure OpenAI is used when an Azure endpoint is configured, api.openai.com
    otherwise. Returns None when AI extraction is disabled or no key is set,
    which makes the extractor go straight to its regex fallback.

    Args:
        api_key: API key (defaults to the Azure or OpenAI key from config)
        model: Model or Azure deployment name
        mode: "structured" (Responses API) or "chat" (JSON mode)
        azure_endpoint: Azure OpenAI endpoint

    Returns:
        AddressModel or None
    """
    if not config.ENABLE_AI_EXTRACTION:
        return None

    azure_endpoint = azure_endpoint or config.AZURE_OPENAI_ENDPOINT
    model = model or config.OPENAI_MODEL
    mode = (mode or config.LLM_MODE).lower()

    if azure_endpoint:
        api_key = api_key or config.AZURE_OPENAI_API_KEY
        if not api_key:
            return None
        client = AzureOpenAI(
            api_key=api_key,
            api_version=config.AZURE_OPENAI_API_VERSION,
            azure_endpoint=azure_endpoint,
            timeout=config.REQUEST_TIMEOUT,
            max_retries=0,
        )
    else:
        api_key = api_key or config.OPENAI_API_KEY
        if not api_key:
            return None
        client = OpenAI(api_key=api_key, timeout=config.REQUEST_TIMEOUT, max_retries=0)

    if mode == "chat":
        return OpenAIChatAddressModel(client, model)
    return OpenAIStructuredAddressModel(client, model)
