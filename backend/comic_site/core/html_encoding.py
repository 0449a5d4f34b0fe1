"""HTML Re-encoding — escaping for rejected form input echoed back to templates.

Invariants:
    - Codepoints below 0x09 become "&#x{n};"
    - '"', '&', "'", '<', '>' become &quot; &amp; &#39; &lt; &gt;
    - Codepoints above 126 become decimal entities "&#{n};"
    - Everything else (including tab, CR and LF) passes through unchanged

Design Decisions:
    - Hand-written table instead of html.escape(): the templates do not
      auto-escape and depend on this exact mapping (non-ASCII as entities,
      newlines preserved for <textarea> re-display)
"""

_NAMED_ENTITIES: dict[str, str] = {
    '"': "&quot;",
    "&": "&amp;",
    "'": "&#39;",
    "<": "&lt;",
    ">": "&gt;",
}


def encode_html(text: str) -> str:
    """Encode every reserved or non-ASCII character of text as an HTML entity."""
    out: list[str] = []
    for ch in text:
        code = ord(ch)
        if code < 0x09:
            out.append(f"&#x{code:x};")
        elif ch in _NAMED_ENTITIES:
            out.append(_NAMED_ENTITIES[ch])
        elif code > 126:
            out.append(f"&#{code};")
        else:
            out.append(ch)
    return "".join(out)
