import posixpath


def suffix_path(base: str, add: str) -> str:
    """Join `add` onto `base`, keeping a trailing slash if `add` has one.

    Example:
        >>> suffix_path("/meta-data", "iam/security-credentials/")
        '/meta-data/iam/security-credentials/'
        >>> suffix_path("/meta-data", "./instance-id")
        '/meta-data/instance-id'
    """
    # posixpath.join would discard `base` for an absolute `add`
    req_path = posixpath.normpath("/".join([base, add]))
    if add and add.endswith("/"):
        req_path += "/"
    return req_path
