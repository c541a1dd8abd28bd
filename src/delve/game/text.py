def article(name: str) -> str:
    return "an" if name[:1].lower() in "aeiou" else "a"


def with_article(name: str) -> str:
    """'orc' -> 'an orc', 'goblin' -> 'a goblin'."""
    return f"{article(name)} {name}"
