"""
URL normalization for frontier membership and same-site containment.

Normalization is plain string work relative to the site root, not RFC 3986
resolution:

- ``..`` segments are not collapsed
- relative hrefs resolve against the site root, not the referring page
- scheme-relative hrefs (``//host/path``) are treated as root-relative paths
- no trailing-slash normalization, so ``http://www.x.com`` and
  ``http://www.x.com/`` are distinct keys

Normalizing an already normalized URL is not guaranteed to be stable.
"""


def absolutize(site_root: str, href: str) -> str:
    """Join an href onto the site root unless it already carries a scheme."""
    if href.startswith('http'):
        return href
    if href.startswith('/') and site_root.endswith('/'):
        return site_root + href[1:]
    if not href.startswith('/') and not site_root.endswith('/'):
        return site_root + '/' + href
    return site_root + href


def add_www(url: str) -> str:
    """Insert ``www.`` after the scheme separator if it is missing."""
    if 'www.' in url:
        return url
    return url.replace('://', '://www.', 1)


def strip_query(url: str) -> str:
    """Drop everything from the first ``?`` on."""
    index = url.find('?')
    if index == -1:
        return url
    return url[:index]


def normalize_url(site_root: str, href: str) -> str:
    """
    Canonicalize a raw href relative to the site root.

    Args:
        site_root: The seed URL the crawl started from
        href: Raw ``href`` attribute value

    Returns:
        Absolute URL with ``www.`` host and no query string
    """
    url = absolutize(site_root, href)
    url = add_www(url)
    return strip_query(url)


def is_same_site(site_root: str, url: str) -> bool:
    # Raw prefix test: lookalike hosts such as www.x.community pass for
    # a root of http://www.x.com.
    return url.startswith(site_root)
