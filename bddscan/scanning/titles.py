from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Optional

from ..errors import StepTitleError
from ..models import StepArgs
from ..naming import lower_words, split_words


def _strip_keyword(words: List[str], keyword: Optional[str]) -> List[str]:
    if not keyword:
        return words
    target = lower_words(keyword)
    if [word.lower() for word in words[: len(target)]] == target:
        return words[len(target) :]
    return words


def _normalise_case(words: List[str]) -> str:
    out = []
    for idx, word in enumerate(words):
        # keep acronyms such as HTTP and the pronoun I, lower-case everything else
        if len(word) > 1 and word.isupper():
            out.append(word)
        elif word == "I" and idx < len(words) - 1:
            out.append(word)
        else:
            out.append(word.lower())
    text = " ".join(out)
    return text[:1].upper() + text[1:]


def name_to_text(name: str, keyword: Optional[str] = None) -> str:
    words = split_words(name)
    remainder = _strip_keyword(words, keyword)
    return _normalise_case(remainder or words)


def flatten_args(inputs: Iterable[Any]) -> List[Any]:
    flat: List[Any] = []
    for item in inputs:
        if isinstance(item, (list, tuple)):
            flat.extend(flatten_args(item))
        else:
            flat.append(item)
    return flat


def title_from_method_name(
    name: str,
    transform: Callable[[str], str],
    args: Optional[StepArgs] = None,
    keyword: Optional[str] = None,
) -> str:
    title = transform(name_to_text(name, keyword))
    if args is None:
        return title

    flat = flatten_args(args.inputs)
    if not args.template:
        return title + " " + ", ".join(str(i) for i in flat)
    return args.template.format(*flat)


class SelfDescribingInvocation:
    """Single invocation of a step method that yields its own title.

    The method is called once to peek at the first produced value. The
    iterator is kept so that executing the step later drains it instead of
    calling the method a second time.
    """

    def __init__(self, method_name: str, call: Callable[[], Iterable[Any]]):
        self.method_name = method_name
        self._call = call
        self._pending: Optional[Iterator[Any]] = None

    def first_text(self) -> Optional[str]:
        try:
            iterator = iter(self._call())
            self._pending = iterator
            first = next(iterator)
        except StopIteration:
            return None
        except Exception as exc:
            raise StepTitleError(self.method_name) from exc
        if first is None:
            return None
        return str(first)

    def drain(self) -> None:
        iterator, self._pending = self._pending, None
        if iterator is None:
            iterator = iter(self._call())
        for _ in iterator:
            pass


def step_title(
    name: str,
    transform: Callable[[str], str],
    args: Optional[StepArgs] = None,
    keyword: Optional[str] = None,
    invocation: Optional[SelfDescribingInvocation] = None,
) -> str:
    if invocation is not None:
        text = invocation.first_text()
        if text is not None:
            return text
    return title_from_method_name(name, transform, args, keyword)
