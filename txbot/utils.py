"""Small string and number helpers shared across the bot."""

from __future__ import annotations


def remove_first_slash(text: str) -> str:
    """Drop a single leading slash, if there is one."""
    return text[1:] if text.startswith("/") else text


def split_string_into_chunks(msg: str, max_line_length: int) -> list[str]:
    """Split text on newlines into chunks no longer than ``max_line_length`` bytes.

    Lines are never broken; a chunk is closed when the next line would push
    it over the limit. Every line in the output ends with a newline.
    """
    chunks: list[str] = []
    current: list[str] = []
    size = 0

    for line in msg.split("\n"):
        length = len(line.encode("utf-8"))
        if size + length > max_line_length:
            chunks.append("".join(current))
            current = []
            size = 0
        current.append(line + "\n")
        size += length + 1

    chunks.append("".join(current))
    return chunks


def strip_trailing_digits(text: str, digits: int) -> str:
    """Keep at most ``digits`` characters after the decimal point."""
    dot = text.find(".")
    if dot < 0:
        return text
    if digits <= 0:
        return text[:dot]
    end = dot + 1 + digits
    if end >= len(text):
        return text
    return text[:end]


def bool_to_float(value: bool) -> float:
    """Map a truthy value to 1.0 and a falsy one to 0.0."""
    return float(bool(value))