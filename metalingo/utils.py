# metalingo/utils.py
"""
本模块包含项目范围内的通用工具函数。
语言代码校验全面采用 langcodes 库。
"""

import re
from collections.abc import Iterable

from langcodes import Language
from langcodes.tag_parser import LanguageTagError

from metalingo.exceptions import InvalidLanguageCodeError

# 语言子标签应该由 2-3 个字母组成 (BCP 47)
LANGUAGE_SUBTAG_PATTERN = re.compile(r"^[a-zA-Z]{2,3}$")


def validate_lang_codes(lang_codes: Iterable[str]) -> None:
    """使用 `langcodes` 库校验每个语言代码是否符合 BCP 47 规范。"""
    for code in lang_codes:
        try:
            lang = Language.get(code)
            if not lang.language or not LANGUAGE_SUBTAG_PATTERN.match(lang.language):
                raise LanguageTagError(
                    f"Tag '{code}' lacks a valid 2-3 letter language subtag."
                )
        except LanguageTagError as e:
            raise InvalidLanguageCodeError(
                f"提供的语言代码 '{code}' 格式无效。原因: {e}"
            ) from e


def normalize_target_languages(
    target_langs: Iterable[str], source_lang: str
) -> list[str]:
    """
    校验并规整目标语言列表。

    去除空白与重复项，并剔除与源语言相同的目标：翻译到源语言永远是空操作，
    既不会发送给引擎，也不会在缓存中查找。返回值保持调用方给出的顺序。
    """
    seen: set[str] = set()
    normalized: list[str] = []
    for raw in target_langs:
        code = raw.strip()
        if not code or code in seen:
            continue
        seen.add(code)
        normalized.append(code)

    validate_lang_codes(normalized)
    return [code for code in normalized if code != source_lang]
