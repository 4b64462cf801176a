"""
Masks sensitive values before a payload reaches the logs.

Two rule lists are applied in order: the filtered params keep nothing,
then the redacted params keep their last 4 characters. A name present in
both lists ends up fully masked since the filtered pass runs first.
Names match keys exactly at any depth, only string values are masked.

The default strategy works on the JSON text of the payload, the
'structure' strategy walks the mappings and lists instead.
"""
import re
from collections.abc import Iterable, Mapping
from functools import lru_cache, partial

from .lib import jsonDumps, jsonLoads

FILTERED_LEAVE = 0
REDACTED_LEAVE = 4


def redactParam(param: str, leave: int) -> str:
    redactNum = max(len(param) - leave, 0)
    return '*' * redactNum + param[redactNum:]


def rulePasses(filteredParams: Iterable[str], redactedParams: Iterable[str]):
    for field in filteredParams:
        yield field, FILTERED_LEAVE
    for field in redactedParams:
        yield field, REDACTED_LEAVE


@lru_cache(maxsize=128)
def fieldPattern(field: str) -> re.Pattern:
    # a JSON string key followed by a JSON string literal, escapes included
    return re.compile('"(' + re.escape(field) + r')":"((?:[^"\\]|\\.)*)"')


def maskMatch(match: re.Match, leave: int) -> str:
    value = jsonLoads(f'"{match.group(2)}"')
    return f'"{match.group(1)}":{jsonDumps(redactParam(value, leave))}'


def redactText(payload, filteredParams: Iterable[str], redactedParams: Iterable[str]):
    stringPayload = jsonDumps(payload)
    for field, leave in rulePasses(filteredParams, redactedParams):
        stringPayload = fieldPattern(field).sub(partial(maskMatch, leave=leave), stringPayload)
    return jsonLoads(stringPayload)


def maskValue(key, value: str, rules: list[tuple[str, int]]) -> str:
    for field, leave in rules:
        if key == field:
            value = redactParam(value, leave)
    return value


def maskTree(target, rules: list[tuple[str, int]]):
    if isinstance(target, Mapping):
        return {
            key: maskValue(key, value, rules) if isinstance(value, str) else maskTree(value, rules)
            for key, value in target.items()
        }
    if isinstance(target, (list, tuple, set, frozenset)):
        return [maskTree(item, rules) for item in target]
    return target


def redactStructure(payload, filteredParams: Iterable[str], redactedParams: Iterable[str]):
    return maskTree(payload, list(rulePasses(filteredParams, redactedParams)))


STRATEGIES = {
    'text': redactText,
    'structure': redactStructure,
}


def redactPayload(payload, filteredParams: Iterable[str], redactedParams: Iterable[str],
                  strategy: str = 'text'):
    """
    Return a redacted copy of payload, the original is left untouched.
    """
    try:
        redactor = STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f'Unknown redaction strategy: {strategy!r}') from None
    return redactor(payload, filteredParams, redactedParams)
