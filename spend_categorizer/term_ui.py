"""Terminal prompts for assigning categories (prompt_toolkit-based).

Kept separate from the core so the interactive bits are easy to test with a
pipe input and ``DummyOutput``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style

ADD_SENTINEL = "+ Add new category..."


class AddCategoryRequest:
    """Returned when the user wants a category that is not in the list yet."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AddCategoryRequest) and other.name == self.name

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"AddCategoryRequest(name={self.name!r})"


def _session(session: PromptSession | None, kb: KeyBindings) -> PromptSession:
    if session is None:
        return PromptSession(key_bindings=kb)
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
        key_bindings=kb,
    )


def _best_prefix_match(words: Sequence[str], text: str) -> str | None:
    if not text:
        return None
    lower = text.lower()
    for w in words:
        wl = w.lower()
        if wl == lower:
            return None
        if wl.startswith(lower):
            return w
    return None


class _PrefixSuggest(AutoSuggest):
    def __init__(self, vocab: Sequence[str]) -> None:
        self._vocab = list(vocab)

    def get_suggestion(self, buffer, document):
        match = _best_prefix_match(self._vocab, document.text)
        if match is None:
            return None
        return Suggestion(match[len(document.text) :])


def select_category(
    categories: Sequence[str] | Iterable[str],
    *,
    default: str,
    message: str = "Category (Enter to accept): ",
    session: PromptSession | None = None,
) -> str | AddCategoryRequest:
    """Prompt for one of ``categories`` with completion and inline suggestions.

    Returns the chosen entry (canonical spelling from ``categories``), or an
    :class:`AddCategoryRequest` when the user picks :data:`ADD_SENTINEL` or
    types a name that is not in the list.
    """

    vocab = list(categories)
    words = [*vocab, ADD_SENTINEL]
    canonical = {w.lower(): w for w in vocab}

    kb = KeyBindings()

    @kb.add("tab", eager=True)
    def _(event) -> None:  # pragma: no cover - integration path
        b = event.app.current_buffer
        cand = _best_prefix_match(vocab, b.document.text)
        if cand:
            b.insert_text(cand[len(b.document.text) :])
        elif b.complete_state is None:
            b.start_completion(select_first=True)
        else:
            b.complete_next()

    @kb.add("enter", eager=True)
    def _(event) -> None:  # pragma: no cover - integration path
        b = event.app.current_buffer
        cs = b.complete_state
        if cs is not None and cs.current_completion is not None:
            b.apply_completion(cs.current_completion)
        else:
            # Enter commits a unique prefix even when no suggestion is rendered.
            cand = _best_prefix_match(vocab, b.document.text)
            if cand:
                b.insert_text(cand[len(b.document.text) :])
        b.validate_and_handle()

    sess = _session(session, kb)
    result = sess.prompt(
        message,
        default=default or "",
        completer=WordCompleter(words, ignore_case=True, match_middle=True),
        auto_suggest=_PrefixSuggest(vocab),
        key_bindings=kb,
        style=Style.from_dict({"auto-suggestion": "fg:#888888"}),
    ).strip()

    if result == "":
        result = default or ""
    if result == ADD_SENTINEL:
        return AddCategoryRequest("")
    if result.lower() in canonical:
        return canonical[result.lower()]
    return AddCategoryRequest(result)


def prompt_text(
    message: str,
    *,
    default: str = "",
    session: PromptSession | None = None,
) -> str | None:
    """Single-line prompt; Esc or Ctrl+C cancels and returns ``None``."""

    kb = KeyBindings()

    @kb.add("escape")
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=None)

    @kb.add("c-c", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=None)

    value = _session(session, kb).prompt(message, default=default, key_bindings=kb)
    if value is None:
        return None
    return value.strip()


__all__ = ["ADD_SENTINEL", "AddCategoryRequest", "prompt_text", "select_category"]
