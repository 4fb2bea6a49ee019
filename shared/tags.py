"""Clan tag normalization."""


def normalize_tag(tag) -> str:
    '''
    Returns the tag upper-cased and prefixed with a single '#'.
    Sheet rows and URL path segments often omit the marker character.
    '''
    tag = str(tag or "").strip().upper()
    if not tag:
        return ""
    if not tag.startswith("#"):
        tag = "#" + tag
    return tag
