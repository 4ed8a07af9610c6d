"""Re-anchor relative resource references in HTML under a site's mount path.

Sites are authored to live at a domain root but are served under
``/s/<site_id>/``. This module rewrites the references a browser resolves
first (stylesheets, scripts, images and links) with plain regular
expressions over the document text. It is not an HTML parser: inline
``<style>`` blocks, event handler attributes, JavaScript strings and CSS
``url(...)`` references inside linked stylesheets are left alone and will
still resolve against the unprefixed location if they are relative.
"""

from __future__ import annotations

import re
from typing import NamedTuple

# Any URL scheme (http:, https:, mailto:, data:, javascript:, ...) or a
# protocol-relative "//host" reference.
_ABSOLUTE_URL = re.compile(r"^(?:[a-z][a-z0-9+.\-]*:|//)", re.IGNORECASE)


class _AttributeContext(NamedTuple):
    pattern: re.Pattern[str]
    keep_fragments: bool


def _attribute_pattern(tag: str, attribute: str) -> re.Pattern[str]:
    return re.compile(
        rf"(?P<prefix><{tag}\b[^<>]*?(?<![\w-]){attribute}\s*=\s*)"
        r"(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)')",
        re.IGNORECASE,
    )


_CONTEXTS = (
    _AttributeContext(_attribute_pattern("link", "href"), keep_fragments=False),
    _AttributeContext(_attribute_pattern("script", "src"), keep_fragments=False),
    _AttributeContext(_attribute_pattern("img", "src"), keep_fragments=False),
    _AttributeContext(_attribute_pattern("a", "href"), keep_fragments=True),
)


def _rebase(value: str, base_path: str, keep_fragments: bool) -> str:
    if value.startswith(base_path) or _ABSOLUTE_URL.match(value):
        return value
    if keep_fragments and value.startswith("#"):
        return value
    return base_path + value.lstrip("/")


def rewrite_relative_paths(html: str, base_path: str) -> str:
    """Prefix relative ``href``/``src`` values in ``html`` with ``base_path``.

    ``base_path`` is expected to end with ``/`` (e.g. ``/s/abc12345/``).
    Root-relative values lose their leading slash so ``/img/a.png`` becomes
    ``/s/abc12345/img/a.png``. Values that already start with ``base_path``
    are kept, but callers should still rewrite a document only once.
    """
    for context in _CONTEXTS:

        def _replace(match: re.Match[str], context: _AttributeContext = context) -> str:
            if match.group("dq") is not None:
                quote, value = '"', match.group("dq")
            else:
                quote, value = "'", match.group("sq")
            rebased = _rebase(value, base_path, context.keep_fragments)
            return f"{match.group('prefix')}{quote}{rebased}{quote}"

        html = context.pattern.sub(_replace, html)
    return html
