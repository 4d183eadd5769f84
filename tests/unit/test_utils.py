# tests/unit/test_utils.py
"""针对 `metalingo.utils` 中语言代码工具函数的单元测试。"""

import pytest

from metalingo.exceptions import InvalidLanguageCodeError
from metalingo.utils import normalize_target_languages, validate_lang_codes


@pytest.mark.parametrize("code", ["en", "zh-Hans", "pt-BR", "fil"])
def test_validate_lang_codes_accepts_bcp47(code: str) -> None:
    validate_lang_codes([code])


@pytest.mark.parametrize("code", ["english", "1234"])
def test_validate_lang_codes_rejects_invalid(code: str) -> None:
    with pytest.raises(InvalidLanguageCodeError, match="格式无效"):
        validate_lang_codes([code])


def test_invalid_language_code_error_is_value_error() -> None:
    """调用方可以继续以 ValueError 捕获语言代码错误。"""
    with pytest.raises(ValueError):
        validate_lang_codes(["english"])


def test_normalize_drops_source_language_and_duplicates() -> None:
    result = normalize_target_languages(["fr", "en", " es ", "fr", ""], "en")
    assert result == ["fr", "es"]


def test_normalize_only_source_language_yields_empty() -> None:
    assert normalize_target_languages(["en", "en"], "en") == []
