"""Turn an offset from HEAD into a git reference."""

TIP = "HEAD"


def resolve_reference(offset: int) -> str:
    """Build the git reference for a commit offset.

    git has no notion of moving forward from HEAD, so a negative
    offset is folded onto the same backward offset rather than
    rejected.

    Args:
        offset: Commits back from HEAD (0 = HEAD)

    Returns:
        "HEAD" for offset 0, otherwise "HEAD~N" with N = abs(offset)
    """
    distance = abs(offset)
    if distance == 0:
        return TIP
    return f"{TIP}~{distance}"
