from pathlib import Path

from app.extraction.exceptions import ExtractionError

_DEFAULT_PROMPT_PATH = Path(__file__).parent / "prompts" / "card_extraction_prompt.txt"


def load_prompt(path: Path | None = None) -> str:
    """Load the card extraction prompt.

    Args:
        path: Path to a prompt file.
              Defaults to the bundled card_extraction_prompt.txt.

    Raises:
        ExtractionError: if the file cannot be read or is blank.
    """
    if path is None:
        path = _DEFAULT_PROMPT_PATH
    try:
        prompt = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ExtractionError(f"Failed to load extraction prompt: {exc}") from exc
    if not prompt:
        raise ExtractionError(f"Extraction prompt is empty: {path}")
    return prompt
