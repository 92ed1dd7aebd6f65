"""Address field extraction using a language model with a ZIP regex fallback."""
import json
import re
from typing import Any, Dict, Optional, Tuple

from address_verifier.core.errors import ExtractionError
from address_verifier.core.llm import AddressModel
from address_verifier.core.models import ParsedAddress
from address_verifier.utils.logging import log_error, log_structured

# First 5-digit token (optionally ZIP+4). A 5-digit house or suite number
# ahead of the real ZIP wins; kept as-is for parity with existing results.
ZIP_PATTERN = re.compile(r"\b\d{5}(?:-\d{4})?\b")


def _balanced_object_end(text: str, start: int) -> int:
    """Index one past the brace closing the object opened at ``start``, or -1."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return -1


def extract_json(text: str) -> Dict[str, Any]:
    """
    Decode a JSON object from raw model text.

    The text is parsed directly first; failing that, the first balanced
    ``{...}`` substring that decodes to an object is used (models sometimes
    wrap JSON in prose or markdown fences).

    Args:
        text: Raw model output

    Returns:
        Decoded JSON object

    Raises:
        ExtractionError: No JSON object could be recovered
    """
    try:
        value = json.loads(text)
    except ValueError:
        value = None
    if isinstance(value, dict):
        return value

    start = text.find("{")
    while start != -1:
        end = _balanced_object_end(text, start)
        if end != -1:
            try:
                value = json.loads(text[start:end])
            except ValueError:
                value = None
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)

    raise ExtractionError("No JSON found from LLM")


def zip_fallback(line: str) -> ParsedAddress:
    """Heuristic parse: only the first ZIP-like token, flagged as fallback."""
    match = ZIP_PATTERN.search(line or "")
    zip_code = match.group(0).split("-")[0] if match else ""
    return ParsedAddress(city="", state="", zip_code=zip_code, fallback=True)


class AddressExtractor:
    """Turns one freeform line into ParsedAddress; never raises."""

    def __init__(self, model: Optional[AddressModel] = None):
        """
        Initialize extractor.

        Args:
            model: Language model client; None disables the model path
        """
        self.model = model

    @property
    def enabled(self) -> bool:
        return self.model is not None

    def extract(self, line: str) -> ParsedAddress:
        parsed, _ = self.extract_with_error(line)
        return parsed

    def extract_with_error(self, line: str) -> Tuple[ParsedAddress, Optional[str]]:
        """
        Extract fields, reporting why the model path failed if it did.

        Args:
            line: Freeform address line

        Returns:
            Tuple of (ParsedAddress, error message or None). On any model
            failure the ParsedAddress comes from ``zip_fallback``.
        """
        if self.model is None:
            return zip_fallback(line), "LLM disabled"

        try:
            text = self.model.complete(line)
            if not text or not text.strip():
                raise ExtractionError("Empty LLM response")
            return ParsedAddress.from_mapping(extract_json(text)), None
        except ExtractionError as e:
            log_structured("warning", "LLM output unusable, using ZIP fallback", stage="parse", error=str(e))
            return zip_fallback(line), str(e)
        except Exception as e:
            log_error(e, {
                "module": "extractor",
                "function": "extract_with_error",
                "line_length": len(line or ""),
            })
            return zip_fallback(line), str(e) or type(e).__name__
