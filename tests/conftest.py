import re
import sys
from pathlib import Path

import pytest


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()

from glyph.analyzer import AnalyzerReport  # noqa: E402
from glyph.config import CoordinatorConfig  # noqa: E402
from glyph.model import Token, TokenCategory  # noqa: E402

_TOKEN_PATTERN = re.compile(r"[A-Za-z_.][A-Za-z0-9_.]*|\d[0-9A-Fa-f]*[hHbB]?|,|\S")
_INSTRUCTIONS = {"MOV", "ADD", "SUB", "INC", "DEC", "JMP", "INT", "PUSH", "POP"}
_REGISTERS = {"AX", "BX", "CX", "DX", "AL", "AH", "BL", "BH", "SI", "DI", "SP", "BP"}


class KeywordAnalyzer:
    """Tokenize by keyword lookup and record every analyzed text."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def analyze(self, source_text: str) -> AnalyzerReport:
        self.calls.append(source_text)
        return AnalyzerReport(success=True, tokens=tokenize(source_text))


def tokenize(source_text: str) -> tuple[Token, ...]:
    tokens: list[Token] = []
    offset = 0
    for line_number, line in enumerate(source_text.split("\n"), start=1):
        for match in _TOKEN_PATTERN.finditer(line):
            text = match.group()
            category = _classify(text)
            tokens.append(
                Token(
                    raw_text=text,
                    category=category,
                    detail=category.value.lower(),
                    line=line_number,
                    start=offset + match.start(),
                    end=offset + match.end(),
                )
            )
        offset += len(line) + 1
    return tuple(tokens)


def _classify(text: str) -> TokenCategory:
    upper = text.upper()
    if upper in _INSTRUCTIONS:
        return TokenCategory.INSTRUCTION
    if upper in _REGISTERS:
        return TokenCategory.REGISTER
    if text == ",":
        return TokenCategory.PUNCTUATION
    if text[0].isdigit():
        return TokenCategory.CONSTANT
    return TokenCategory.SYMBOL


@pytest.fixture
def keyword_analyzer() -> KeywordAnalyzer:
    return KeywordAnalyzer()


@pytest.fixture
def fast_config() -> CoordinatorConfig:
    return CoordinatorConfig(debounce_seconds=0.02, analysis_timeout_seconds=1.0)


@pytest.fixture
def tokenize_source():
    return tokenize
