"""
Language codes accepted by the speech service and their display names
"""

from typing import NamedTuple, Optional

# Codes as the speech service spells them; lookups ignore case
DEFAULT_LANGUAGES = {
    "ko-KR": "Korean (Korea)",
    "en-US": "English (US)",
    "fr-FR": "French (France)",
    "de-DE": "German (Germany)",
    "es-ES": "Spanish (Spain)",
    "ja-JP": "Japanese (Japan)",
    "it-IT": "Italian (Italy)",
    "pr-BR": "Portuguese (Brazil)",
    "ru-RU": "Russian (Russia)",
    "zh-CN": "Chinese (Mandarin, simplified)",
}


class ParsedFileName(NamedTuple):
    base_name: str
    language_code: str
    extension: str


def parse_file_name(name: str) -> Optional[ParsedFileName]:
    """
    Split a file name of the form baseName.languageCode.extension

    Returns:
        ParsedFileName, or None if the name does not have exactly three segments
    """
    parts = (name or "").split(".")
    if len(parts) != 3:
        return None
    return ParsedFileName(*parts)


class LanguageTable:
    """Case-insensitive mapping from language code to display name"""

    def __init__(self, languages: Optional[dict[str, str]] = None):
        self._canonical = {}
        self._names = {}
        for code, display_name in (languages or DEFAULT_LANGUAGES).items():
            self._canonical[code.lower()] = code
            self._names[code.lower()] = display_name

    def __contains__(self, code: str) -> bool:
        return (code or "").lower() in self._names

    def __len__(self) -> int:
        return len(self._names)

    def resolve(self, code: str) -> Optional[str]:
        """Get the display name for a code, or None if unknown"""
        return self._names.get((code or "").lower())

    def canonical_code(self, code: str) -> Optional[str]:
        """Get the code as spelled in the table, e.g. "en-us" -> "en-US" """
        return self._canonical.get((code or "").lower())

    def codes(self) -> list[str]:
        return list(self._canonical.values())
