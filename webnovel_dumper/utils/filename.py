MARKDOWN_EXTENSION = '.md'

def sanitize_title(text: str) -> str:
    """
    Turns a novel display title into a file stem.

    Characters that are neither alphanumeric nor whitespace are dropped and
    every whitespace character becomes an underscore.

    Example: "The Great Novel: Part I" -> "The_Great_Novel_Part_I"
    """
    if not isinstance(text, str):
        raise TypeError("Input must be a string.")

    return ''.join('_' if char.isspace() else char for char in text if char.isalnum() or char.isspace())

def build_output_filename(title: str, fallback: str) -> str:
    """Returns `<sanitized title>.md`, using `fallback` when the title sanitizes to nothing."""
    stem = sanitize_title(title) or sanitize_title(fallback) or 'novel'
    return stem + MARKDOWN_EXTENSION
