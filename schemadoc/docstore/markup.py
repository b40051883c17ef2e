"""Docstring to Markdown rendering with cross-reference resolution.

Three link forms are recognized outside code:

* reference definitions ``[text]: https://...`` (removed from the output,
  their uses become inline links),
* doc links ``[Name]``, ``[Class.member]``, ``[module.Name]``,
* Sphinx roles such as ``:class:`~pkg.Name``` or ``:attr:`Name.field```.

Unresolved doc links stay as written; unresolved roles become inline code.
"""

import re
from typing import Protocol

_FENCE = re.compile(r"^\s*(```|~~~)")
_DOCTEST = re.compile(r"^\s*(>>>|\.\.\.)( |$)")
_LINK_DEFINITION = re.compile(r"^\s*\[([^\[\]]+)\]:\s*(\S+)\s*$")
_CODE_SPAN = re.compile(r"(`+)(?:.+?)\1")
_BRACKET = re.compile(r"(?<![\w\]\\!])\[([^\[\]]+)\](?![(\[:])")
_ROLE = re.compile(r":(?:py:)?(class|func|meth|attr|mod|obj|data|exc|const|type):`(~?)([\w.]+)`")
_SYMBOL = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")


class LinkResolver(Protocol):
    """Resolves symbol references seen in one module's docs to URLs."""

    def resolve(self, target: str) -> str | None:
        """URL for a (possibly dotted) symbol reference, or None when it does not resolve."""
        ...

    def resolve_module(self, target: str) -> str | None:
        """URL for a module reference, or None when it does not resolve."""
        ...


def render_markdown(text: str, resolver: LinkResolver) -> str:
    """Convert a raw docstring into Markdown with resolved links."""
    if not text.strip():
        return ""
    definitions: dict[str, str] = {}
    lines: list[str] = []
    for line in text.splitlines():
        match = _LINK_DEFINITION.match(line)
        if match:
            definitions[match.group(1)] = match.group(2)
        else:
            lines.append(line)

    rendered: list[str] = []
    in_fence = False
    for line in lines:
        if _FENCE.match(line):
            in_fence = not in_fence
            rendered.append(line)
            continue
        if in_fence or _DOCTEST.match(line):
            rendered.append(line)
            continue
        line = _ROLE.sub(lambda m: _render_role(m, resolver), line)
        rendered.append(_render_links(line, definitions, resolver))

    while rendered and not rendered[-1].strip():
        rendered.pop()
    return "\n".join(line.rstrip() for line in rendered) + "\n"


def _render_role(match: re.Match[str], resolver: LinkResolver) -> str:
    role, short, target = match.group(1), match.group(2), match.group(3)
    target = target.lstrip(".")
    text = target.rsplit(".", 1)[-1] if short else target
    url = resolver.resolve_module(target) if role == "mod" else resolver.resolve(target)
    if url is None:
        return f"`{text}`"
    return f"[{text}]({url})"


def _render_links(line: str, definitions: dict[str, str], resolver: LinkResolver) -> str:
    """Replace bracketed references outside inline code spans."""
    pieces: list[str] = []
    position = 0
    for code in _CODE_SPAN.finditer(line):
        pieces.append(_BRACKET.sub(lambda m: _render_bracket(m, definitions, resolver), line[position : code.start()]))
        pieces.append(code.group(0))
        position = code.end()
    pieces.append(_BRACKET.sub(lambda m: _render_bracket(m, definitions, resolver), line[position:]))
    return "".join(pieces)


def _render_bracket(match: re.Match[str], definitions: dict[str, str], resolver: LinkResolver) -> str:
    text = match.group(1)
    if text in definitions:
        return f"[{text}]({definitions[text]})"
    if _SYMBOL.match(text):
        url = resolver.resolve(text)
        if url is not None:
            return f"[{text}]({url})"
    return match.group(0)
