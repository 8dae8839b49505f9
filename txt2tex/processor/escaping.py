"""LaTeX escaping for message text.

Text is processed as UTF-8 bytes. Strings decoded with ``surrogateescape``
keep invalid bytes, so output stays byte-compatible with the input.
"""

LATEX_ESCAPES = {
    ord("\\"): b"\\textbackslash{}",
    ord("{"): b"\\{",
    ord("}"): b"\\}",
    ord("#"): b"\\#",
    ord("$"): b"\\$",
    ord("%"): b"\\%",
    ord("&"): b"\\&",
    ord("_"): b"\\_",
    ord("^"): b"\\textasciicircum{}",
    ord("~"): b"\\textasciitilde{}",
}

UNICODE_COMMAND = b"\\emoji"


def utf8_char_len(lead: int) -> int:
    """Length of the UTF-8 sequence introduced by a lead byte.

    Bytes that cannot start a sequence count as a single byte.
    """
    if lead & 0x80 == 0:
        return 1
    if lead & 0xE0 == 0xC0:
        return 2
    if lead & 0xF0 == 0xE0:
        return 3
    if lead & 0xF8 == 0xF0:
        return 4
    return 1


def escape_latex_bytes(data: bytes) -> bytes:
    """Escape raw UTF-8 bytes for LaTeX.

    Special ASCII characters are replaced from LATEX_ESCAPES. Each
    multi-byte sequence is wrapped whole in ``\\emoji{...}``.
    """
    out = bytearray()
    i = 0
    n = len(data)

    while i < n:
        byte = data[i]
        if byte < 0x80:
            out += LATEX_ESCAPES.get(byte, bytes((byte,)))
            i += 1
            continue

        end = min(i + utf8_char_len(byte), n)
        out += UNICODE_COMMAND + b"{" + data[i:end] + b"}"
        i = end

    return bytes(out)


def escape_latex(text: str) -> str:
    """Escape text for LaTeX.

    Args:
        text: Line text, possibly holding surrogate-escaped bytes.

    Returns:
        Escaped text.
    """
    data = text.encode("utf-8", errors="surrogateescape")
    return escape_latex_bytes(data).decode("utf-8", errors="surrogateescape")
