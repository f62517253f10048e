"""Small terminal prompts (prompt_toolkit-based).

Kept apart from the CLI so they can be driven from tests with a pipe input.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import ValidationError, Validator

from .categories import Category


class _PrefixSuggest(AutoSuggest):
    """Grey inline completion of the first name starting with the typed text."""

    def __init__(self, vocab: Sequence[str]) -> None:
        self._vocab = list(vocab)

    def get_suggestion(self, buffer, document):
        match = _best_prefix_match(self._vocab, document.text)
        if match is None:
            return None
        return Suggestion(match[len(document.text) :])


def _best_prefix_match(vocab: Sequence[str], text: str) -> str | None:
    if not text:
        return None
    lower = text.casefold()
    for w in vocab:
        wl = w.casefold()
        if wl == lower:
            return None
        if wl.startswith(lower):
            return w
    return None


def select_category(
    categories: Sequence[Category] | Iterable[Category],
    *,
    default: str = "",
    message: str = "Categoria: ",
    session: PromptSession | None = None,
) -> Category:
    """Prompt for one of ``categories`` by display name.

    Enter accepts the typed name or, when the text is a prefix of a name,
    completes it first. Names outside the list are rejected in place.
    """

    options = list(categories)
    names = [c.name for c in options]
    by_name = {c.name.casefold(): c for c in options}

    class _KnownCategory(Validator):
        def validate(self, document) -> None:
            if document.text.strip().casefold() not in by_name:
                raise ValidationError(
                    message="Escolha uma categoria: " + ", ".join(names),
                    cursor_position=len(document.text),
                )

    kb = KeyBindings()

    @kb.add("enter", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised through pipe input
        b = event.app.current_buffer
        cs = b.complete_state
        if cs is not None and cs.current_completion is not None:
            b.apply_completion(cs.current_completion)
        else:
            match = _best_prefix_match(names, b.document.text)
            if match is not None:
                b.insert_text(match[len(b.document.text) :])
        b.validate_and_handle()

    if session is None:
        sess: PromptSession = PromptSession(key_bindings=kb)
    else:
        sess = PromptSession(
            input=getattr(session, "input", None),
            output=getattr(session, "output", None),
            key_bindings=kb,
        )

    text = sess.prompt(
        message,
        default=default,
        completer=WordCompleter(names, ignore_case=True, match_middle=True),
        auto_suggest=_PrefixSuggest(names),
        validator=_KnownCategory(),
        validate_while_typing=False,
        style=Style.from_dict({"auto-suggestion": "fg:#888888"}),
    )
    return by_name[text.strip().casefold()]


__all__ = ["select_category"]
